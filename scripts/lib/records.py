"""
Safe accessors for loosely-typed funnel records.

Records arrive as plain dicts keyed by the external table's column names.
Any field may be missing, hold a lookup array instead of a scalar, or be
of the wrong type, so every read goes through the helpers below. Field
aliases are kept in one place so the aggregators agree on them.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional, Sequence

from dateutil.parser import parse as dateutil_parse

from scripts.lib.config import SELF_ALIASES
from scripts.lib.weeks import try_parse_week_start

Record = Dict[str, Any]

# ---------------------------------------------------------------------------
# Field aliases
# ---------------------------------------------------------------------------

WEEK_START_FIELD = "Week start of report date"
EMAIL_FIELDS = ("Email (from Lead list)", "Email")
REPORT_DATE_FIELDS = ("report date", "Report date")
MEDIUM_FIELDS = (
    "Medium",
    "Source / medium",
    "Medium (from Source / medium)",
    "source_medium",
    "Source/medium",
)
LEAD_SOURCE_FIELD = "Source (from Lead list)"
SOURCE_MEDIUM_FIELD = "Source / medium"
INTERACTION_LINKEDIN_FIELD = "Lead Linkedin Url (from Lead list)"
LEAD_LIST_LINKEDIN_FIELD = "Person Linkedin Url"

RECOMMENDATION_MARKER = "rec"


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple)):
        return not any(not _is_blank(v) for v in value)
    return False


def first_truthy(value: Any) -> Any:
    """Collapse a lookup array to its first non-blank element."""
    if isinstance(value, (list, tuple)):
        for item in value:
            if not _is_blank(item):
                return item
        return None
    return value


def get_value(record: Any, *keys: str) -> Any:
    """Return the first non-blank value among ``keys``, or None."""
    if not isinstance(record, dict):
        return None
    for key in keys:
        value = first_truthy(record.get(key))
        if not _is_blank(value):
            return value
    return None


def get_string(record: Any, *keys: str) -> str:
    """First non-blank value among ``keys`` as a stripped string ("" if none)."""
    value = get_value(record, *keys)
    if value is None:
        return ""
    return str(value).strip()


def get_lower(record: Any, *keys: str) -> str:
    return get_string(record, *keys).lower()


def get_number(record: Any, *keys: str, default: float = 0.0) -> float:
    """First value among ``keys`` coerced to a number; ``default`` otherwise."""
    value = get_value(record, *keys)
    if value is None:
        return default
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def get_week_start(record: Any) -> str:
    """The record's week key as stored; "" when absent."""
    return get_string(record, WEEK_START_FIELD)


def as_records(value: Any) -> list:
    """Coerce a table payload to a list of dict records."""
    if not isinstance(value, (list, tuple)):
        return []
    return [r for r in value if isinstance(r, dict)]


# ---------------------------------------------------------------------------
# Normalizers
# ---------------------------------------------------------------------------

def get_email(record: Any) -> str:
    """Canonical (trimmed, lower-cased) email, or "" when the record has none."""
    return get_lower(record, *EMAIL_FIELDS)


def parse_generic_date(value: Any) -> Optional[date]:
    """Parse ISO-8601 or other free-form date strings; None if unparseable."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if _is_blank(value) or not isinstance(value, str):
        return None
    text = value.strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return dateutil_parse(text).date()
    except (ValueError, OverflowError, TypeError):
        return None


def get_record_date(record: Any) -> Optional[date]:
    """Best available calendar date for a record.

    The report date (a specific day) wins over the week start (an interval
    anchor). Returns None when neither resolves.
    """
    report_date = get_value(record, *REPORT_DATE_FIELDS)
    if report_date is not None:
        parsed = try_parse_week_start(str(report_date))
        if parsed is None:
            parsed = parse_generic_date(report_date)
        if parsed is not None:
            return parsed

    week_start = get_week_start(record)
    if week_start:
        return try_parse_week_start(week_start)
    return None


def get_medium(record: Any) -> str:
    """Channel attribution for a website session, lower-cased."""
    return get_lower(record, *MEDIUM_FIELDS)


def is_recommendation(record: Any) -> bool:
    """Crude referral filter: the medium contains "rec" anywhere."""
    return RECOMMENDATION_MARKER in get_medium(record)


def is_internal_or_test(record: Any) -> bool:
    """Internal leads and test traffic never count towards funnel metrics."""
    if "internal" in get_lower(record, LEAD_SOURCE_FIELD):
        return True
    return "test" in get_lower(record, SOURCE_MEDIUM_FIELD)


# ---------------------------------------------------------------------------
# DM senders
# ---------------------------------------------------------------------------

def is_me_sender(sender: Any, aliases: Optional[Iterable[str]] = None) -> bool:
    """Whether a DM "Sender" value denotes our own account.

    Empty senders and "me" count as ours, as does any sender containing
    one of the configured alias substrings.
    """
    text = "" if sender is None else str(sender).strip().lower()
    if text in ("", "me"):
        return True
    alias_list: Sequence[str] = tuple(aliases) if aliases is not None else SELF_ALIASES
    return any(alias and alias.lower() in text for alias in alias_list)


def normalize_sender(sender: Any, aliases: Optional[Iterable[str]] = None) -> str:
    """Collapse all of our own sender labels to "me"."""
    if is_me_sender(sender, aliases):
        return "me"
    return str(sender).strip().lower()
