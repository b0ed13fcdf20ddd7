"""Tests for the inactive lead-magnet lead report."""

from datetime import date

import pytest

from scripts.inactive_leads import find_inactive_leads, parse_since, split_deck_sources
from scripts.lib.errors import DataError

TODAY = date(2025, 1, 15)
SINCE = date(2025, 1, 5)


def _visit(email, report_date="07/01/2025", medium="Recommended-by-partner", **extra):
    record = {
        "Email (from Lead list)": [email],
        "report date": report_date,
        "Source / medium": medium,
    }
    record.update(extra)
    return record


class TestParseSince:
    def test_day_first(self):
        assert parse_since("05/01/2025", TODAY) == date(2025, 1, 5)

    def test_iso(self):
        assert parse_since("2025-01-05", TODAY) == date(2025, 1, 5)

    def test_defaults_to_lookback_window(self):
        assert parse_since(None, TODAY) == date(2025, 1, 8)
        assert parse_since("  ", TODAY) == date(2025, 1, 8)

    def test_rejects_garbage(self):
        with pytest.raises(DataError) as exc:
            parse_since("garbage", TODAY)
        assert exc.value.code == "INVALID_DATE"


class TestSplitDeckSources:
    def test_partitions_by_tag(self):
        records = [
            {"id": 1, "__deckSource": "primary"},
            {"id": 2, "__deckSource": "redemptive"},
            {"id": 3},
        ]
        primary, redemptive = split_deck_sources(records)
        assert [r["id"] for r in primary] == [1, 3]
        assert [r["id"] for r in redemptive] == [2]


class TestFindInactiveLeads:
    def test_submission_exclusion_is_all_time(self):
        primary = [_visit("a@x.com"), _visit("b@x.com")]
        reports = [{"Email": "A@x.com", "report date": "01/06/2023"}]

        result = find_inactive_leads(primary, [], reports, [], since=SINCE, today=TODAY)

        assert [lead.email for lead in result.leads] == ["b@x.com"]
        assert result.count == 1
        assert result.debug.total_submissions_ever == 1

    def test_since_is_inclusive(self):
        primary = [
            _visit("on@x.com", report_date="05/01/2025"),
            _visit("before@x.com", report_date="04/01/2025"),
        ]
        result = find_inactive_leads(primary, [], [], [], since=SINCE, today=TODAY)
        assert [lead.email for lead in result.leads] == ["on@x.com"]

    def test_falls_back_to_week_start_and_drops_undated(self):
        primary = [
            {
                "Email": "week@x.com",
                "Week start of report date": "05/01/2025",
                "Source / medium": "rec",
            },
            {"Email": "undated@x.com", "Source / medium": "rec"},
        ]
        result = find_inactive_leads(primary, [], [], [], since=SINCE, today=TODAY)
        assert [lead.email for lead in result.leads] == ["week@x.com"]

    def test_filters_medium_and_internal_traffic(self):
        primary = [
            _visit("organic@x.com", medium="organic"),
            _visit("tester@x.com", medium="rec / test"),
            _visit("staff@x.com", **{"Source (from Lead list)": ["Internal"]}),
            _visit("ok@x.com"),
        ]
        result = find_inactive_leads(primary, [], [], [], since=SINCE, today=TODAY)
        assert [lead.email for lead in result.leads] == ["ok@x.com"]

    def test_linkedin_from_visit_then_lead_list(self):
        primary = [
            _visit("a@x.com", **{"Lead Linkedin Url (from Lead list)": ["https://li/a-visit"]}),
            _visit("b@x.com"),
            _visit("c@x.com"),
        ]
        lead_list = [
            {"Email": "a@x.com", "Person Linkedin Url": "https://li/a-list"},
            {"Email": "B@X.com", "Person Linkedin Url": "https://li/b-list"},
        ]
        result = find_inactive_leads(primary, [], [], lead_list, since=SINCE, today=TODAY)

        urls = {lead.email: lead.linkedin_url for lead in result.leads}
        assert urls == {
            "a@x.com": "https://li/a-visit",
            "b@x.com": "https://li/b-list",
            "c@x.com": None,
        }
        assert result.debug.leads_with_linkedin == 2
        assert result.debug.leads_without_linkedin == 1

    def test_debug_site_tally(self):
        primary = [_visit("p@x.com"), _visit("both@x.com")]
        redemptive = [_visit("r@x.com"), _visit("both@x.com")]

        result = find_inactive_leads(
            primary, redemptive, [{"Email": "r@x.com"}], [], since=SINCE, today=TODAY
        )

        debug = result.debug
        assert debug.total_visits_tracked == 3
        assert debug.leads_with_either_site == 3
        assert debug.leads_with_primary_only == 1
        assert debug.leads_with_redemptive_only == 1
        assert debug.leads_with_both_sites == 1
        assert debug.inactive_leads_count == 2
        assert sorted(lead.email for lead in result.leads) == ["both@x.com", "p@x.com"]

    def test_result_shape(self):
        result = find_inactive_leads([], [], [], [], since=SINCE, today=TODAY)
        payload = result.model_dump(by_alias=True)

        assert payload["leads"] == []
        assert payload["count"] == 0
        assert payload["date_range"] == {"from": "2025-01-05", "to": "2025-01-15"}
        assert payload["criteria"] == {"visited_either_site": True, "no_submission": True}
