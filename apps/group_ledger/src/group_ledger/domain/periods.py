"""Time period helpers for expense and payment queries."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from zoneinfo import ZoneInfo

_LAST_N_DAYS = re.compile(r"last (\d+) days?")


@dataclass(frozen=True, slots=True)
class TimeRange:
    """Half-open datetime interval; `end` is exclusive and optional."""

    start: datetime
    end: datetime | None = None

    def __post_init__(self) -> None:
        if self.end is not None and self.end <= self.start:
            raise ValueError("TimeRange end must be after start")

    def contains(self, moment: datetime) -> bool:
        if moment < self.start:
            return False
        return self.end is None or moment < self.end


def _start_of_day(day: date, zone: tzinfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=zone)


def _first_of_month(year: int, month: int) -> date:
    return date(year=year, month=month, day=1)


def _previous_month(day: date) -> date:
    if day.month == 1:
        return _first_of_month(day.year - 1, 12)
    return _first_of_month(day.year, day.month - 1)


def resolve_time_period(
    phrase: str | None,
    *,
    now: datetime,
    timezone: str = "UTC",
) -> TimeRange | None:
    """Map a loose period phrase such as "last month" to a TimeRange.

    Recognized phrases: today, this week (weeks start on Sunday), this month,
    last month, this year and "last N days". Anything else yields None, which
    callers treat as "no time filter".
    """

    if not phrase:
        return None

    zone = ZoneInfo(timezone)
    local_now = now.astimezone(zone) if now.tzinfo else now.replace(tzinfo=zone)
    today = local_now.date()
    lowered = phrase.lower()

    if "today" in lowered:
        start = _start_of_day(today, zone)
        return TimeRange(start=start, end=start + timedelta(days=1))
    if "this week" in lowered:
        days_since_sunday = (today.weekday() + 1) % 7
        return TimeRange(
            start=_start_of_day(today - timedelta(days=days_since_sunday), zone)
        )
    if "this month" in lowered:
        return TimeRange(
            start=_start_of_day(_first_of_month(today.year, today.month), zone)
        )
    if "last month" in lowered:
        this_month = _first_of_month(today.year, today.month)
        return TimeRange(
            start=_start_of_day(_previous_month(today), zone),
            end=_start_of_day(this_month, zone),
        )
    if "this year" in lowered:
        return TimeRange(start=_start_of_day(date(today.year, 1, 1), zone))

    match = _LAST_N_DAYS.search(lowered)
    if match:
        days = int(match.group(1))
        return TimeRange(start=_start_of_day(today - timedelta(days=days), zone))

    return None


def date_range(start_date: date | None, end_date: date | None) -> TimeRange | None:
    """Build an inclusive calendar-date filter as a half-open UTC TimeRange."""

    if start_date is None and end_date is None:
        return None
    utc = ZoneInfo("UTC")
    start = _start_of_day(start_date or date.min, utc)
    # date.max has no following day; treat it as an open end.
    end = (
        _start_of_day(end_date + timedelta(days=1), utc)
        if end_date is not None and end_date < date.max
        else None
    )
    return TimeRange(start=start, end=end)
