"""
Inactive Lead-Magnet Leads
============================

Leads who visited either deck-analysis site (primary or redemptive) on or
after a given date through a referral medium, but never submitted a deck.
The submission exclusion is all-time: a lead who submitted long before the
window is still excluded.

Each lead is paired with a LinkedIn URL, taken from the visit record when
present and otherwise from the lead list.

Usage:
    from scripts.inactive_leads import find_inactive_leads, parse_since
    result = find_inactive_leads(primary, redemptive, deck_reports, lead_list,
                                 since=parse_since("05/01/2025", today))
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from models.funnel_models import (
    DateRange,
    InactiveLead,
    InactiveLeadsDebug,
    InactiveLeadsResult,
)
from scripts.funnel_metrics import DECK_SOURCE_FIELD, PRIMARY, REDEMPTIVE
from scripts.lib.config import DEFAULT_CONFIG
from scripts.lib.errors import DataError
from scripts.lib.logger import setup_logger
from scripts.lib.records import (
    INTERACTION_LINKEDIN_FIELD,
    LEAD_LIST_LINKEDIN_FIELD,
    Record,
    as_records,
    get_email,
    get_record_date,
    get_string,
    is_internal_or_test,
    is_recommendation,
    parse_generic_date,
)
from scripts.lib.weeks import try_parse_week_start

logger = setup_logger(__name__)


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

def parse_since(value: Optional[str], today: date) -> date:
    """Resolve the report's lower bound.

    Accepts DD/MM/YYYY, then YYYY-MM-DD, then any other parseable date.
    Defaults to ``inactive_lookback_days`` before ``today`` when empty.

    Raises:
        DataError: if ``value`` is given but cannot be parsed.
    """
    if not value or not value.strip():
        return today - timedelta(days=DEFAULT_CONFIG["inactive_lookback_days"])

    text = value.strip()
    parsed = try_parse_week_start(text)
    if parsed is not None:
        return parsed
    try:
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        pass
    parsed = parse_generic_date(text)
    if parsed is None:
        raise DataError(
            f"Invalid 'from' date format: {value!r}. Use DD/MM/YYYY or YYYY-MM-DD format.",
            code="INVALID_DATE",
            details={"value": value},
        )
    return parsed


def split_deck_sources(records: Any) -> Tuple[List[Record], List[Record]]:
    """Partition cached deck interactions into (primary, redemptive).

    Records carry a ``__deckSource`` tag; untagged records are primary.
    """
    primary: List[Record] = []
    redemptive: List[Record] = []
    for record in as_records(records):
        if record.get(DECK_SOURCE_FIELD) == REDEMPTIVE:
            redemptive.append(record)
        else:
            primary.append(record)
    return primary, redemptive


# ---------------------------------------------------------------------------
# Computation
# ---------------------------------------------------------------------------

def _track_visits(
    records: Iterable[Record],
    site: str,
    since: date,
    visits: Dict[str, Set[str]],
    linkedin: Dict[str, str],
) -> None:
    for record in records:
        email = get_email(record)
        if not email or is_internal_or_test(record):
            continue

        # Records without a resolvable date are out of range, not always in
        record_date = get_record_date(record)
        if record_date is None or record_date < since:
            continue

        if not is_recommendation(record):
            continue

        visits.setdefault(email, set()).add(site)

        url = get_string(record, INTERACTION_LINKEDIN_FIELD)
        if url and email not in linkedin:
            linkedin[email] = url


def find_inactive_leads(
    primary_interactions: Any,
    redemptive_interactions: Any,
    deck_reports: Any,
    lead_list: Any,
    since: date,
    today: Optional[date] = None,
) -> InactiveLeadsResult:
    """Leads who visited a deck-analysis site since ``since`` but never submitted."""
    today = today or date.today()
    if isinstance(since, datetime):
        since = since.date()

    visits: Dict[str, Set[str]] = {}
    linkedin: Dict[str, str] = {}
    _track_visits(as_records(primary_interactions), PRIMARY, since, visits, linkedin)
    _track_visits(as_records(redemptive_interactions), REDEMPTIVE, since, visits, linkedin)

    visited = [email for email, sites in visits.items() if sites]

    submitted: Set[str] = set()
    for record in as_records(deck_reports):
        email = get_email(record)
        if email:
            submitted.add(email)

    inactive = [email for email in visited if email not in submitted]

    # Lead list is the fallback source for LinkedIn URLs
    for record in as_records(lead_list):
        email = get_email(record)
        if not email or email in linkedin:
            continue
        url = get_string(record, LEAD_LIST_LINKEDIN_FIELD)
        if url:
            linkedin[email] = url

    leads = [InactiveLead(email=email, linkedin_url=linkedin.get(email)) for email in inactive]
    with_linkedin = sum(1 for lead in leads if lead.linkedin_url is not None)

    debug = InactiveLeadsDebug(
        total_visits_tracked=len(visits),
        leads_with_either_site=len(visited),
        leads_with_primary_only=sum(1 for s in visits.values() if s == {PRIMARY}),
        leads_with_redemptive_only=sum(1 for s in visits.values() if s == {REDEMPTIVE}),
        leads_with_both_sites=sum(1 for s in visits.values() if len(s) >= 2),
        total_submissions_ever=len(submitted),
        inactive_leads_count=len(inactive),
        leads_with_linkedin=with_linkedin,
        leads_without_linkedin=len(leads) - with_linkedin,
    )
    logger.info(
        "Inactive leads since %s: %d of %d visitors (%d submissions ever)",
        since.isoformat(), len(inactive), len(visited), len(submitted),
    )

    return InactiveLeadsResult(
        leads=leads,
        count=len(leads),
        date_range=DateRange(from_date=since.isoformat(), to_date=today.isoformat()),
        debug=debug,
    )
