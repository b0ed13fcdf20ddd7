"""
Funnel Metrics
================

Week-over-week aggregation of the funnel tables: email sends and
interactions, LinkedIn DM conversations, organic leads, and the lead-magnet
(deck analysis) and sales-funnel (FF website) sessions.

Every aggregator follows the same two phases:
  1. fold the records into a ``{week_key: accumulator}`` map
  2. materialize one Metric per week, sort by week date, add WoW deltas

Records are loosely typed; anything without a week key or rejected by the
aggregator's filter is skipped rather than raising.

Exports:
    with_week_over_week_deltas, materialize, count_by_week,
    calculate_*_metrics, calculate_*_leads
"""

from __future__ import annotations

from collections import Counter, defaultdict
from datetime import datetime, timezone
from functools import cmp_to_key, partial
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Union

from dateutil.parser import parse as dateutil_parse

from models.funnel_models import DeckBreakdown, Metric
from scripts.lib.config import DEFAULT_CONFIG
from scripts.lib.logger import setup_logger
from scripts.lib.records import (
    Record,
    as_records,
    get_email,
    get_lower,
    get_medium,
    get_number,
    get_string,
    get_value,
    get_week_start,
    is_internal_or_test,
    is_me_sender,
    is_recommendation,
    normalize_sender,
    parse_generic_date,
)
from scripts.lib.weeks import compare_weeks, format_week_key, week_sort_key, week_start_of

logger = setup_logger(__name__)

PRIMARY = "primary"
REDEMPTIVE = "redemptive"
DECK_SOURCE_FIELD = "__deckSource"


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _safe_div(numerator: float, denominator: float) -> Optional[float]:
    """Zero-safe division returning None when the denominator is 0."""
    if not denominator:
        return None
    return numerator / denominator


def _percent(numerator: float, denominator: float) -> Optional[float]:
    ratio = _safe_div(numerator, denominator)
    return None if ratio is None else ratio * 100


def _as_count(value: float) -> Union[int, float]:
    """Whole-number sums stay ints so counts serialize as ``2``, not ``2.0``."""
    return int(value) if float(value).is_integer() else value


def _records(value: Any, name: str) -> List[Record]:
    """Coerce an input table to a list of records, warning when it is not one."""
    if not isinstance(value, (list, tuple)):
        if value is not None:
            logger.warning("%s is not a list (%s); treating as empty", name, type(value).__name__)
        return []
    return as_records(value)


def with_week_over_week_deltas(metrics: List[Metric]) -> List[Metric]:
    """Attach ``previous_week`` and ``change`` to every week after the first.

    ``change`` is the percent delta from the previous week's value, or 0
    when the previous value is not positive.
    """
    result: List[Metric] = []
    for i, metric in enumerate(metrics):
        if i == 0:
            result.append(metric.model_copy(update={"previous_week": None, "change": None}))
            continue
        previous = metrics[i - 1].value
        change = ((metric.value - previous) / previous) * 100 if previous > 0 else 0
        result.append(metric.model_copy(update={"previous_week": previous, "change": change}))
    return result


def materialize(
    week_map: Dict[str, Any],
    build: Callable[[str, Any], Metric],
) -> List[Metric]:
    """Build one Metric per week, sort chronologically and add WoW deltas."""
    metrics = [build(week, acc) for week, acc in week_map.items()]
    metrics.sort(key=lambda m: week_sort_key(m.week))
    return with_week_over_week_deltas(metrics)


def count_by_week(
    records: Iterable[Record],
    include: Callable[[Record], bool],
    week_of: Callable[[Record], Optional[str]] = get_week_start,
) -> List[Metric]:
    """Count records per week among those accepted by ``include``."""
    counts: Counter = Counter()
    for record in records:
        week = week_of(record)
        if not week or not include(record):
            continue
        counts[week] += 1
    return materialize(counts, lambda week, count: Metric(week=week, value=count))


# ---------------------------------------------------------------------------
# Email sends by sequence
# ---------------------------------------------------------------------------

def _fold_email_sends(
    sent_email_log: List[Record],
    email_interactions: List[Record],
    sequence_filter: Callable[[str], bool],
) -> Dict[str, Dict[str, Any]]:
    week_map: Dict[str, Dict[str, Any]] = defaultdict(
        lambda: {"sent": 0, "success": 0, "failed": 0, "emails": set()}
    )

    # Each sent-log record is one email send
    for record in sent_email_log:
        week = get_week_start(record)
        if not week or not sequence_filter(get_lower(record, "Sequence")):
            continue
        acc = week_map[week]
        acc["sent"] += 1
        acc["success"] += 1
        email = get_email(record)
        if email:
            acc["emails"].add(email)

    # Undeliverable / unsubscribed events move sends from success to failed,
    # but only for weeks that already have sends.
    for record in email_interactions:
        event = get_lower(record, "Event")
        if event != "unsubscribed" and "fail" not in event:
            continue
        week = get_week_start(record)
        if week and week in week_map:
            week_map[week]["success"] -= 1
            week_map[week]["failed"] += 1

    return dict(week_map)


def _build_send_metric(week: str, acc: Dict[str, Any]) -> Metric:
    return Metric(
        week=week,
        value=acc["sent"],
        percentage=_percent(acc["success"], acc["sent"]),
        success=acc["success"],
        failed=acc["failed"],
        unique_emails=len(acc["emails"]),
    )


def calculate_email_metrics_by_sequence(
    sent_email_log: Any,
    email_interactions: Any,
    sequence_filter: Callable[[str], bool],
) -> List[Metric]:
    """Weekly email sends for sequences accepted by ``sequence_filter``.

    ``sequence_filter`` receives the lower-cased sequence name.
    """
    week_map = _fold_email_sends(
        _records(sent_email_log, "sent_email_log"),
        _records(email_interactions, "email_interactions"),
        sequence_filter,
    )
    return materialize(week_map, _build_send_metric)


def is_mkt_outreach_sequence(sequence: str) -> bool:
    return "mkt outreach" in sequence


def is_nurture_sequence(sequence: str) -> bool:
    return "nurture" in sequence or "win-back" in sequence or sequence == "general nurture"


def calculate_email_outreach_metrics(sent_email_log: Any, email_interactions: Any) -> List[Metric]:
    """Sends across all sequences."""
    return calculate_email_metrics_by_sequence(sent_email_log, email_interactions, lambda _: True)


def calculate_mkt_outreach_metrics(sent_email_log: Any, email_interactions: Any) -> List[Metric]:
    return calculate_email_metrics_by_sequence(
        sent_email_log, email_interactions, is_mkt_outreach_sequence
    )


def calculate_nurture_email_metrics(sent_email_log: Any, email_interactions: Any) -> List[Metric]:
    return calculate_email_metrics_by_sequence(
        sent_email_log, email_interactions, is_nurture_sequence
    )


# ---------------------------------------------------------------------------
# Email interactions by mailgun tag
# ---------------------------------------------------------------------------

OUTREACH_TAGS = ("outreach", "mkt outreach")
NURTURE_TAGS = ("nurture", "win-back")
ANALYSIS_RESULT_TAGS = ("analysis", "result", "lead magnet", "deck analysis", "report")


def _mailgun_tags(record: Record) -> List[str]:
    raw = record.get("mailgun_tags")
    values = raw if isinstance(raw, (list, tuple)) else [raw]
    return [str(v).strip().lower() for v in values if v is not None and str(v).strip()]


def tag_matcher(keywords: Iterable[str]) -> Callable[[List[str]], bool]:
    """Build a filter accepting records with any tag containing any keyword."""
    keywords = tuple(keywords)

    def _matches(tags: List[str]) -> bool:
        return any(kw in tag for tag in tags for kw in keywords)

    return _matches


def _new_interaction_acc() -> Dict[str, Any]:
    return {
        "opened": 0,
        "clicked": 0,
        "unsubscribed": 0,
        "interactions": Counter(),
        "opened_emails": set(),
        "clicked_emails": set(),
        "open_counts": Counter(),
        # dicts keep first-seen order for the link lists
        "links": {},
        "links_by_email": defaultdict(dict),
    }


def _fold_email_interactions(
    email_interactions: List[Record],
    tag_filter: Callable[[List[str]], bool],
) -> Dict[str, Dict[str, Any]]:
    week_map: Dict[str, Dict[str, Any]] = defaultdict(_new_interaction_acc)

    for record in email_interactions:
        week = get_week_start(record)
        if not week or not tag_filter(_mailgun_tags(record)):
            continue

        acc = week_map[week]
        event = get_lower(record, "Event")
        if "open" in event:
            acc["opened"] += 1
        elif "click" in event:
            acc["clicked"] += 1
        elif "unsubscribe" in event:
            acc["unsubscribed"] += 1

        email = get_email(record)
        if not email:
            continue
        acc["interactions"][email] += 1

        if "open" in event:
            acc["opened_emails"].add(email)
            acc["open_counts"][email] += 1
        if "click" in event:
            acc["clicked_emails"].add(email)
            link = get_string(record, "Click link")
            if link:
                acc["links"][link] = None
                acc["links_by_email"][email][link] = None

    return dict(week_map)


def _build_interaction_metric(week: str, acc: Dict[str, Any]) -> Metric:
    unique_emails = len(acc["interactions"])
    return Metric(
        week=week,
        value=acc["opened"],
        percentage=_percent(acc["clicked"], acc["opened"]),
        clicked=acc["clicked"],
        unique_emails=unique_emails,
        unique_emails_opened=len(acc["opened_emails"]),
        unique_emails_clicked=len(acc["clicked_emails"]),
        avg_interactions_per_lead=_safe_div(sum(acc["interactions"].values()), unique_emails),
        leads_opened_multiple=sum(1 for n in acc["open_counts"].values() if n > 1),
        links=list(acc["links"]),
        click_links_by_email={e: list(links) for e, links in acc["links_by_email"].items()},
    )


def calculate_email_interaction_metrics_by_tag(
    email_interactions: Any,
    tag_filter: Callable[[List[str]], bool],
) -> List[Metric]:
    """Weekly opens (value) and clicks for interactions whose tags pass ``tag_filter``."""
    week_map = _fold_email_interactions(
        _records(email_interactions, "email_interactions"), tag_filter
    )
    return materialize(week_map, _build_interaction_metric)


def calculate_email_interaction_metrics(email_interactions: Any) -> List[Metric]:
    """Interactions across all tags."""
    return calculate_email_interaction_metrics_by_tag(email_interactions, lambda _: True)


def calculate_outreach_email_interaction_metrics(email_interactions: Any) -> List[Metric]:
    return calculate_email_interaction_metrics_by_tag(
        email_interactions, tag_matcher(OUTREACH_TAGS)
    )


def calculate_nurture_email_interaction_metrics(email_interactions: Any) -> List[Metric]:
    return calculate_email_interaction_metrics_by_tag(
        email_interactions, tag_matcher(NURTURE_TAGS)
    )


def calculate_analysis_result_email_interaction_metrics(email_interactions: Any) -> List[Metric]:
    """Interactions with the deck-analysis result emails sent by the lead magnet."""
    return calculate_email_interaction_metrics_by_tag(
        email_interactions, tag_matcher(ANALYSIS_RESULT_TAGS)
    )


# ---------------------------------------------------------------------------
# LinkedIn DMs
# ---------------------------------------------------------------------------

def _dm_fields(record: Record):
    return (
        get_week_start(record),
        get_string(record, "Conversation_id"),
        get_string(record, "Sender"),
    )


def calculate_dm_metrics(
    linkedin_dm_log: Any,
    aliases: Optional[Iterable[str]] = None,
) -> List[Metric]:
    """New DM conversations per week and how many of them got a reply.

    A conversation is counted once, in the earliest week it appears. It is
    "replied" when it ever has two or more distinct senders (our own
    aliases collapse to one), and the reply is credited to that first week
    no matter when it arrived.
    """
    records = _records(linkedin_dm_log, "linkedin_dm_log")
    weeks_seen: Set[str] = set()
    first_week: Dict[str, str] = {}
    senders: Dict[str, Set[str]] = defaultdict(set)

    # Pass 1: first week and sender set per conversation
    for record in records:
        week, conversation_id, sender = _dm_fields(record)
        if not week or not conversation_id:
            continue
        weeks_seen.add(week)
        known = first_week.get(conversation_id)
        if known is None or compare_weeks(week, known) < 0:
            first_week[conversation_id] = week
        senders[conversation_id].add(normalize_sender(sender, aliases))

    # Pass 2: attribute conversations (and replies) to their first week
    week_map: Dict[str, Dict[str, Set[str]]] = {
        week: {"dmed": set(), "replied": set()} for week in weeks_seen
    }
    for conversation_id, week in first_week.items():
        week_map[week]["dmed"].add(conversation_id)
        if len(senders[conversation_id]) >= 2:
            week_map[week]["replied"].add(conversation_id)

    def build(week: str, acc: Dict[str, Set[str]]) -> Metric:
        dmed = len(acc["dmed"])
        replied = len(acc["replied"])
        return Metric(
            week=week,
            value=dmed,
            percentage=_percent(replied, dmed),
            replied=replied,
            no_reply=dmed - replied,
        )

    return materialize(week_map, build)


def calculate_dm_lead_replied_metrics(
    linkedin_dm_log: Any,
    aliases: Optional[Iterable[str]] = None,
) -> List[Metric]:
    """Distinct conversations per week in which the lead sent a message."""
    week_map: Dict[str, Set[str]] = {}
    for record in _records(linkedin_dm_log, "linkedin_dm_log"):
        week, conversation_id, sender = _dm_fields(record)
        if not week or not conversation_id:
            continue
        replied = week_map.setdefault(week, set())
        if not is_me_sender(sender, aliases):
            replied.add(conversation_id)

    return materialize(week_map, lambda week, ids: Metric(week=week, value=len(ids)))


def _timestamp(value: str) -> Optional[float]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = dateutil_parse(value)
        except (ValueError, OverflowError):
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def _compare_messages(a: Dict[str, Any], b: Dict[str, Any]) -> int:
    ts_a, ts_b = a["ts"], b["ts"]
    if ts_a is not None and ts_b is not None and ts_a != ts_b:
        return -1 if ts_a < ts_b else 1
    return compare_weeks(a["week"], b["week"])


def calculate_dm_followup_metrics(
    linkedin_dm_log: Any,
    aliases: Optional[Iterable[str]] = None,
) -> List[Metric]:
    """Distinct conversations per week where we messaged after the lead replied.

    Messages are ordered by "Sent time" (falling back to week order); the
    follow-up is credited to the week of our message.
    """
    conversations: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
    for record in _records(linkedin_dm_log, "linkedin_dm_log"):
        week, conversation_id, sender = _dm_fields(record)
        if not week or not conversation_id:
            continue
        conversations[conversation_id].append({
            "week": week,
            "is_me": is_me_sender(sender, aliases),
            "ts": _timestamp(get_string(record, "Sent time")),
        })

    week_map: Dict[str, Set[str]] = defaultdict(set)
    for conversation_id, messages in conversations.items():
        ordered = sorted(messages, key=cmp_to_key(_compare_messages))
        lead_has_replied = False
        for index, message in enumerate(ordered):
            if not message["is_me"]:
                lead_has_replied = True
            elif lead_has_replied and index > 0:
                week_map[message["week"]].add(conversation_id)

    return materialize(week_map, lambda week, ids: Metric(week=week, value=len(ids)))


# ---------------------------------------------------------------------------
# Organic leads
# ---------------------------------------------------------------------------

LEAD_MAGNET_SOURCE = "Lead magnet"
BOOK_A_CALL_SOURCE = "Book a call"


def lead_week_start(record: Record) -> Optional[str]:
    """Week key of a lead, derived from "Created" when the week field is empty."""
    week = get_week_start(record)
    if week:
        return week
    created = parse_generic_date(get_value(record, "Created"))
    if created is None:
        return None
    return format_week_key(week_start_of(created))


def _source_in(*sources: str) -> Callable[[Record], bool]:
    return lambda record: get_string(record, "Source") in sources


def calculate_organic_leads(lead_list: Any) -> List[Metric]:
    """New leads per week from the lead magnet or the book-a-call form."""
    return count_by_week(
        _records(lead_list, "lead_list"),
        _source_in(LEAD_MAGNET_SOURCE, BOOK_A_CALL_SOURCE),
        week_of=lead_week_start,
    )


def calculate_lead_magnet_leads(lead_list: Any) -> List[Metric]:
    return count_by_week(
        _records(lead_list, "lead_list"), _source_in(LEAD_MAGNET_SOURCE), week_of=lead_week_start
    )


def calculate_book_a_call_leads(lead_list: Any) -> List[Metric]:
    return count_by_week(
        _records(lead_list, "lead_list"), _source_in(BOOK_A_CALL_SOURCE), week_of=lead_week_start
    )


# ---------------------------------------------------------------------------
# Website sessions (lead magnet + sales funnel)
# ---------------------------------------------------------------------------

def _new_session_acc() -> Dict[str, Any]:
    return {
        "count": 0,
        "total_duration": 0.0,
        "clicks": 0.0,
        "mediums": set(),
        "lead_sessions": Counter(),
        "click_emails": {},
        "high_interest": {},
        "bounce": {},
        PRIMARY: {"count": 0, "duration": 0.0, "mediums": set()},
        REDEMPTIVE: {"count": 0, "duration": 0.0, "mediums": set()},
    }


def _fold_sessions(
    tagged_records: Iterable[tuple],
    config: Optional[Dict[str, Any]] = None,
) -> Dict[str, Dict[str, Any]]:
    """Fold ``(record, deck_source)`` pairs into per-week session totals.

    Every non-internal, non-test session counts towards landed, duration and
    clicks; only referral ("rec") mediums count as unique visits.
    """
    config = {**DEFAULT_CONFIG, **(config or {})}
    high_interest_seconds = config["high_interest_seconds"]
    bounce_seconds = config["bounce_seconds"]

    week_map: Dict[str, Dict[str, Any]] = defaultdict(_new_session_acc)
    for record, deck_source in tagged_records:
        week = get_week_start(record)
        if not week or is_internal_or_test(record):
            continue

        acc = week_map[week]
        duration = get_number(record, "Session Duration (second)")
        clicks = get_number(record, "Click book a call button")
        medium = get_medium(record)

        acc["count"] += 1
        acc["total_duration"] += duration
        acc["clicks"] += clicks

        split = acc[deck_source]
        split["count"] += 1
        split["duration"] += duration

        if is_recommendation(record):
            acc["mediums"].add(medium)
            split["mediums"].add(medium)

        email = get_email(record)
        if not email:
            continue
        acc["lead_sessions"][email] += 1
        if clicks > 0:
            acc["click_emails"][email] = None
        if duration > high_interest_seconds:
            acc["high_interest"][email] = None
        if 0 < duration < bounce_seconds:
            acc["bounce"][email] = None

    return dict(week_map)


def _build_landed(week: str, acc: Dict[str, Any]) -> Metric:
    return Metric(
        week=week,
        value=acc["count"],
        deck_breakdown=DeckBreakdown(
            primary_count=acc[PRIMARY]["count"],
            redemptive_count=acc[REDEMPTIVE]["count"],
        ),
    )


def _build_avg_duration(week: str, acc: Dict[str, Any], deck_breakdown: bool = True) -> Metric:
    primary, redemptive = acc[PRIMARY], acc[REDEMPTIVE]
    breakdown = None
    if deck_breakdown:
        breakdown = DeckBreakdown(
            primary_average_duration=_safe_div(primary["duration"], primary["count"]),
            redemptive_average_duration=_safe_div(redemptive["duration"], redemptive["count"]),
        )
    return Metric(
        week=week,
        value=acc["total_duration"] / acc["count"],
        high_interest_count=len(acc["high_interest"]),
        bounce_count=len(acc["bounce"]),
        high_interest_leads=list(acc["high_interest"]),
        bounce_leads=list(acc["bounce"]),
        deck_breakdown=breakdown,
    )


def _build_unique_visits(week: str, acc: Dict[str, Any], deck_breakdown: bool = True) -> Metric:
    breakdown = None
    if deck_breakdown:
        breakdown = DeckBreakdown(
            primary_unique_visits=len(acc[PRIMARY]["mediums"]),
            redemptive_unique_visits=len(acc[REDEMPTIVE]["mediums"]),
        )
    return Metric(
        week=week,
        value=len(acc["mediums"]),
        unique_visits=len(acc["mediums"]),
        lead_emails=list(acc["lead_sessions"]),
        lead_session_counts=dict(acc["lead_sessions"]),
        lead_count_label="Sessions",
        deck_breakdown=breakdown,
    )


def _fold_submissions(deck_reports: List[Record]) -> Dict[str, Dict[str, Any]]:
    week_map: Dict[str, Dict[str, Any]] = defaultdict(
        lambda: {"submissions": 0, "leads": Counter()}
    )
    for record in deck_reports:
        week = get_week_start(record)
        if not week:
            continue
        acc = week_map[week]
        acc["submissions"] += 1
        email = get_email(record)
        if email:
            acc["leads"][email] += 1
    return dict(week_map)


def _build_submissions(week: str, acc: Dict[str, Any]) -> Metric:
    return Metric(
        week=week,
        value=acc["submissions"],
        unique_leads=len(acc["leads"]),
        lead_emails=list(acc["leads"]),
        lead_session_counts=dict(acc["leads"]),
        lead_count_label="Submissions",
    )


def _tag_deck_source(records: List[Record], default: str):
    for record in records:
        source = record.get(DECK_SOURCE_FIELD) or default
        yield record, REDEMPTIVE if source == REDEMPTIVE else PRIMARY


def calculate_lead_magnet_metrics(
    deck_analysis_interactions: Any,
    deck_reports: Any,
    redemptive_deck_analysis_interactions: Any = (),
    config: Optional[Dict[str, Any]] = None,
) -> Dict[str, List[Metric]]:
    """Lead-magnet (deck analysis) performance series.

    Returns a dict of series:
      landed        - sessions per week
      avg_duration  - mean session duration in seconds
      submissions   - deck reports submitted
      unique_visits - distinct referral mediums
    """
    primary = _records(deck_analysis_interactions, "deck_analysis_interactions")
    redemptive = _records(redemptive_deck_analysis_interactions, "redemptive_deck_analysis_interactions")

    def tagged():
        yield from _tag_deck_source(primary, PRIMARY)
        yield from _tag_deck_source(redemptive, REDEMPTIVE)

    sessions = _fold_sessions(tagged(), config=config)
    submissions = _fold_submissions(_records(deck_reports, "deck_reports"))

    logger.debug(
        "Lead magnet: %d session weeks, %d submission weeks", len(sessions), len(submissions)
    )
    return {
        "landed": materialize(sessions, _build_landed),
        "avg_duration": materialize(sessions, _build_avg_duration),
        "submissions": materialize(submissions, _build_submissions),
        "unique_visits": materialize(sessions, _build_unique_visits),
    }


def _build_clicks(week: str, acc: Dict[str, Any]) -> Metric:
    return Metric(
        week=week,
        value=_as_count(acc["clicks"]),
        click_lead_emails=list(acc["click_emails"]),
    )


def _build_click_to_landed(week: str, acc: Dict[str, Any]) -> Metric:
    # Landed over clicked, matching the "% Landed over Clicked" card
    return Metric(
        week=week,
        value=_as_count(acc["clicks"]),
        percentage=_percent(acc["count"], acc["clicks"]),
    )


def calculate_sales_funnel_metrics(
    ff_interactions: Any,
    book_a_call: Any = (),
    config: Optional[Dict[str, Any]] = None,
) -> Dict[str, List[Metric]]:
    """Sales-funnel (FF website) series.

    Returns a dict of series:
      landed          - sessions per week
      avg_duration    - mean session duration in seconds
      clicks          - sum of "Click book a call button"
      click_to_landed - clicks, with landed/clicks as the percentage
      unique_visits   - distinct referral mediums
      bookings        - "Book a call" records per week
    """
    ff = _records(ff_interactions, "ff_interactions")
    sessions = _fold_sessions(((record, PRIMARY) for record in ff), config=config)
    bookings = count_by_week(_records(book_a_call, "book_a_call"), lambda _: True)

    logger.debug("Sales funnel: %d session weeks, %d booking weeks", len(sessions), len(bookings))
    return {
        "landed": materialize(sessions, lambda w, a: Metric(week=w, value=a["count"])),
        "avg_duration": materialize(sessions, partial(_build_avg_duration, deck_breakdown=False)),
        "clicks": materialize(sessions, _build_clicks),
        "click_to_landed": materialize(sessions, _build_click_to_landed),
        "unique_visits": materialize(sessions, partial(_build_unique_visits, deck_breakdown=False)),
        "bookings": bookings,
    }
