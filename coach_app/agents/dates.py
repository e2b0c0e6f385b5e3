"""Relative-date, recurrence and time-of-day resolution for planner requests.

Every function takes the caller's ``now`` explicitly; nothing here reads the
system clock except ``local_now``, which the orchestrator calls once per
request.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
MONTHS = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)

_WEEKDAY_RE = re.compile(r"\b(" + "|".join(WEEKDAYS) + r")s?\b")
_MONTH_RE = re.compile(r"\b(" + "|".join(MONTHS) + r")\b")
# A year only counts right after a month name or "in"/"of", and only 1900-2099.
_YEAR_RE = re.compile(r"\b(?:" + "|".join(MONTHS) + r"|in|of)\s*,?\s+((?:19|20)\d{2})\b")
_RECURRING_RE = re.compile(r"\b(every|all)\b")
_TIME_HM_RE = re.compile(r"\b(\d{1,2}):(\d{2})\s*(am|pm)\b")
_TIME_H_RE = re.compile(r"\b(\d{1,2})\s*(am|pm)\b")

DEFAULT_WORKOUT_TIME = "18:00"
DEFAULT_MEAL_TIME = "12:00"


@dataclass
class DateResolution:
    recurring: bool
    dates: List[date] = field(default_factory=list)


def local_now(tz_name: Optional[str] = None) -> datetime:
    """Current wall-clock time in ``tz_name`` (IANA), or the server's local zone.

    Raises ValueError for unknown zone names.
    """
    if tz_name:
        try:
            return datetime.now(ZoneInfo(tz_name))
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {tz_name}") from e
    return datetime.now().astimezone()


def to_local_day(value: date | datetime) -> str:
    """YYYY-MM-DD of the calendar day ``value`` falls on in its own zone.

    Aware datetimes are never shifted to UTC first, so a late-evening entry
    stays on the user's day.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    return value.isoformat()


def find_weekday(text: str) -> Optional[int]:
    m = _WEEKDAY_RE.search(text)
    return WEEKDAYS.index(m.group(1)) if m else None


def find_month(text: str) -> Optional[int]:
    m = _MONTH_RE.search(text)
    return MONTHS.index(m.group(1)) + 1 if m else None


def resolve_year(text: str, now: datetime) -> int:
    m = _YEAR_RE.search(text)
    if m:
        return int(m.group(1))
    if "next year" in text:
        return now.year + 1
    return now.year


def is_recurring(text: str) -> bool:
    return bool(_RECURRING_RE.search(text))


def recurring_dates(weekday: int, month: int, year: int) -> List[date]:
    """Every date in ``month`` of ``year`` that falls on ``weekday`` (Monday=0)."""
    first = date(year, month, 1)
    current = first + timedelta(days=(weekday - first.weekday()) % 7)
    dates: List[date] = []
    while current.month == month:
        dates.append(current)
        current += timedelta(days=7)
    return dates


def next_weekday(today: date, weekday: int) -> date:
    """Next occurrence of ``weekday`` strictly after ``today`` (1 to 7 days ahead)."""
    delta = (weekday - today.weekday()) % 7
    return today + timedelta(days=delta or 7)


def resolve_single_date(text: str, now: datetime) -> date:
    today = now.date()
    if "tomorrow" in text:
        return today + timedelta(days=1)
    if "next week" in text:
        return today + timedelta(days=7)
    weekday = find_weekday(text)
    if weekday is not None:
        return next_weekday(today, weekday)
    return today


def resolve_dates(text: str, now: datetime) -> DateResolution:
    """Resolve a lowered message into one date, or every date of a recurring request.

    A recurring request without both a weekday and a month resolves to an
    empty list.
    """
    if not is_recurring(text):
        return DateResolution(recurring=False, dates=[resolve_single_date(text, now)])
    weekday = find_weekday(text)
    month = find_month(text)
    if weekday is None or month is None:
        return DateResolution(recurring=True, dates=[])
    try:
        dates = recurring_dates(weekday, month, resolve_year(text, now))
    except ValueError:
        return DateResolution(recurring=True, dates=[])
    return DateResolution(recurring=True, dates=dates)


def _to_24h(hour: int, minute: int, meridiem: str) -> Optional[str]:
    if not 1 <= hour <= 12 or not 0 <= minute <= 59:
        return None
    hour = hour % 12
    if meridiem == "pm":
        hour += 12
    return f"{hour:02d}:{minute:02d}"


def resolve_time(text: str, item_type: str) -> str:
    """HH:MM (24h) from an explicit ``H:MM am/pm`` or ``H am/pm``, else the type default."""
    m = _TIME_HM_RE.search(text)
    if m:
        parsed = _to_24h(int(m.group(1)), int(m.group(2)), m.group(3))
        if parsed:
            return parsed
    m = _TIME_H_RE.search(text)
    if m:
        parsed = _to_24h(int(m.group(1)), 0, m.group(2))
        if parsed:
            return parsed
    return DEFAULT_MEAL_TIME if item_type == "meal" else DEFAULT_WORKOUT_TIME


def mentions_time(text: str) -> bool:
    return bool(_TIME_HM_RE.search(text) or _TIME_H_RE.search(text))
