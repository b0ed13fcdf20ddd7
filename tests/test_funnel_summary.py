"""Tests for the dashboard summary cards."""

from datetime import date

from models.funnel_models import Metric
from scripts.funnel_summary import (
    SUMMARY_CARDS,
    build_funnel_dashboard,
    build_summary_card,
    build_summary_cards,
    compute_funnel_series,
    recent_metrics,
)

W1 = "29/12/2024"
W2 = "05/01/2025"
W3 = "12/01/2025"
WEEK = "Week start of report date"
# Wednesday of W3: W1 and W2 are complete, W3 is in progress
NOW = date(2025, 1, 15)


def _series(*values):
    weeks = [W1, W2, W3][: len(values)]
    return [Metric(week=w, value=v) for w, v in zip(weeks, values)]


def _tables():
    return {
        "sentEmailLog": [
            {WEEK: W1, "Sequence": "MKT Outreach"},
            {WEEK: W2, "Sequence": "MKT Outreach"},
            {WEEK: W2, "Sequence": "MKT Outreach"},
            {WEEK: W3, "Sequence": "MKT Outreach"},
        ],
        "emailInteractions": [],
        "linkedinDMLog": [
            {WEEK: W2, "Conversation_id": "C1", "Sender": "Me"},
            {WEEK: W2, "Conversation_id": "C1", "Sender": "Alice"},
        ],
        "leadList": [{WEEK: W2, "Source": "Lead magnet"}],
        "deckAnalysisInteractions": [
            {WEEK: W2, "Source / medium": "rec", "Session Duration (second)": 12},
            {
                WEEK: W2,
                "Source / medium": "rec",
                "Session Duration (second)": 30,
                "__deckSource": "redemptive",
            },
        ],
        "deckReports": [],
        "ffInteractions": [
            {
                WEEK: W2,
                "Source / medium": "google / organic",
                "Click book a call button": 1,
            },
        ],
        "bookACall": [],
        "lastUpdated": "2025-01-15T08:00:00Z",
    }


class TestRecentMetrics:
    def test_skips_current_week(self):
        last, previous = recent_metrics(_series(1, 2, 3), NOW)
        assert last.week == W2
        assert previous.week == W1

    def test_sorts_before_selecting(self):
        series = list(reversed(_series(1, 2, 3)))
        last, _ = recent_metrics(series, NOW)
        assert last.week == W2

    def test_falls_back_when_nothing_completed(self):
        last, previous = recent_metrics([Metric(week=W3, value=5)], NOW)
        assert last.week == W3
        assert previous is None

    def test_empty_series(self):
        assert recent_metrics([], NOW) == (None, None)


class TestSummaryCards:
    def test_card_fields(self):
        series = [Metric(week=W1, value=4), Metric(week=W2, value=6, change=50.0)]
        card = build_summary_card("organic-leads", "New Organic Leads", series, NOW)

        assert card["week"] == W2
        assert card["week_label"] == "Jan 05 – Jan 11, 2025"
        assert card["value"] == 6
        assert card["change"] == 50.0
        assert card["previous_value"] == 4

    def test_empty_series_has_no_card(self):
        assert build_summary_card("k", "Title", [], NOW) is None

    def test_cards_only_for_series_with_data(self):
        cards = build_summary_cards({"organic_leads": _series(1, 2)}, NOW)
        assert [c["key"] for c in cards] == ["organic-leads"]


class TestComputeFunnelSeries:
    def test_every_card_has_a_series(self):
        series = compute_funnel_series(_tables())
        assert {name for _, _, name in SUMMARY_CARDS} <= set(series)

    def test_series_values(self):
        series = compute_funnel_series(_tables())

        assert [m.value for m in series["mkt_outreach_sent"]] == [1, 2, 1]
        assert series["dm_new_conversations"][0].replied == 1
        assert series["organic_leads"][0].value == 1

        landed = series["lead_magnet_landed"][0]
        assert landed.value == 2
        assert landed.deck_breakdown.redemptive_count == 1

    def test_organic_website_sessions_count_as_landed(self):
        series = compute_funnel_series(_tables())

        assert series["sales_landed"][0].value == 1
        assert series["sales_clicks"][0].value == 1
        assert series["sales_unique_visits"][0].value == 0

    def test_empty_snapshot(self):
        series = compute_funnel_series({})
        assert all(metrics == [] for metrics in series.values())


class TestBuildFunnelDashboard:
    def test_dashboard_payload(self):
        dashboard = build_funnel_dashboard(_tables(), NOW)

        assert dashboard["last_updated"] == "2025-01-15T08:00:00Z"
        first = dashboard["series"]["mkt_outreach_sent"][0]
        assert first["week"] == W1
        assert first["value"] == 1
        assert "change" not in first
        assert dashboard["dm_details"][0]["week"] == W2

        mkt = next(c for c in dashboard["summary"] if c["key"] == "mkt-outreach-sent")
        assert mkt["week"] == W2
        assert mkt["value"] == 2
        assert mkt["change"] == 100
