"""
Week-key helpers.

A week key is the ``DD/MM/YYYY`` string of the Sunday that starts a week.
Keys must be ordered by the date they denote: a lexical sort of DD/MM/YYYY
is wrong whenever the displayed window crosses a month or year boundary.

Usage:
    from scripts.lib.weeks import compare_weeks, current_week_start, week_sort_key
    series.sort(key=lambda m: week_sort_key(m.week))
"""
from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from functools import cmp_to_key
from typing import Any, Optional, Union

from scripts.lib.errors import WeekKeyError

WEEK_KEY_FORMAT = "%d/%m/%Y"
_WEEK_KEY_RE = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")

DateLike = Union[date, datetime]


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def parse_week_start(value: Any) -> date:
    """Parse a strict ``DD/MM/YYYY`` string into a calendar date.

    Raises:
        WeekKeyError: for any other shape, or an impossible calendar date.
    """
    if not isinstance(value, str):
        raise WeekKeyError(value)
    match = _WEEK_KEY_RE.match(value.strip())
    if not match:
        raise WeekKeyError(value)
    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        raise WeekKeyError(value)


def try_parse_week_start(value: Any) -> Optional[date]:
    """Like parse_week_start, but returns None instead of raising."""
    try:
        return parse_week_start(value)
    except WeekKeyError:
        return None


def week_start_of(value: DateLike) -> date:
    """Return the Sunday on or before ``value``."""
    day = _as_date(value)
    # Monday == 0 ... Sunday == 6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def format_week_key(value: DateLike) -> str:
    return _as_date(value).strftime(WEEK_KEY_FORMAT)


def current_week_start(now: DateLike) -> str:
    """Week key of the week containing ``now``."""
    return format_week_key(week_start_of(now))


def compare_weeks(a: Any, b: Any) -> int:
    """Three-way compare two week keys by the date they denote.

    Empty keys sort last. A key that does not parse sorts after one that
    does; two unparsable keys fall back to string comparison.
    """
    if not a and not b:
        return 0
    if not a:
        return 1
    if not b:
        return -1

    date_a = try_parse_week_start(str(a))
    date_b = try_parse_week_start(str(b))

    if date_a is not None and date_b is not None:
        return (date_a > date_b) - (date_a < date_b)
    if date_a is not None:
        return -1
    if date_b is not None:
        return 1

    str_a, str_b = str(a), str(b)
    return (str_a > str_b) - (str_a < str_b)


week_sort_key = cmp_to_key(compare_weeks)


def is_completed_week(week: Any, now: DateLike) -> bool:
    """True when ``week`` started before the week containing ``now``."""
    start = try_parse_week_start(week)
    if start is None:
        return False
    return start < week_start_of(now)


def format_range(week: Any) -> str:
    """Human label spanning Sunday..Saturday, e.g. ``Jan 05 – Jan 11, 2025``."""
    if not week:
        return "N/A"
    start = try_parse_week_start(week)
    if start is None:
        return str(week)
    end = start + timedelta(days=6)
    return f"{start.strftime('%b %d')} – {end.strftime('%b %d, %Y')}"
