"""Date and week helpers shared by the log store, the aggregator and the API."""
from datetime import date, datetime, timedelta
from typing import List, Optional, Union

from workout_tracker_api.models import WeekDate

DateLike = Union[date, datetime]

# Monday-first, matching date.weekday()
WEEKDAY_NAMES = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]
MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]
REST_DAYS = frozenset({"Saturday", "Sunday"})
STORAGE_KEY_PREFIX = "workout-log-"


def _as_date(value: DateLike) -> date:
    """Drop the time-of-day component, if any."""
    if isinstance(value, datetime):
        return value.date()
    return value


def _today(today: Optional[DateLike]) -> date:
    return _as_date(today) if today is not None else date.today()


def day_name(value: DateLike) -> str:
    """Weekday name of a date, e.g. 'Monday'."""
    return WEEKDAY_NAMES[_as_date(value).weekday()]


def current_weekday(today: Optional[DateLike] = None) -> str:
    """Weekday name for today (or the given reference date)."""
    return day_name(_today(today))


def format_key(value: DateLike) -> str:
    """
    Render a date as 'EEEE, MMMM d, yyyy', e.g. 'Monday, October 19, 2026'.

    Used both for display and as the storage key of a day's log, so it must
    not depend on the process locale or on the time of day.
    """
    d = _as_date(value)
    return f"{WEEKDAY_NAMES[d.weekday()]}, {MONTH_NAMES[d.month - 1]} {d.day}, {d.year:04d}"


def storage_key(value: DateLike) -> str:
    """Per-day cache key: 'workout-log-<formatted date>'."""
    return f"{STORAGE_KEY_PREFIX}{format_key(value)}"


def current_week(today: Optional[DateLike] = None) -> List[WeekDate]:
    """
    Return the 7 days of the week containing today, Monday first.

    Sunday belongs to the week that started six days earlier.
    """
    ref = _today(today)
    # 0=Sunday .. 6=Saturday
    index = (ref.weekday() + 1) % 7
    days_from_monday = 6 if index == 0 else index - 1
    monday = ref - timedelta(days=days_from_monday)

    ref_iso = ref.isoformat()
    week = []
    for offset in range(7):
        d = monday + timedelta(days=offset)
        week.append(
            WeekDate(
                date=d,
                day_name=day_name(d),
                is_today=d.isoformat() == ref_iso,
            )
        )
    return week


def is_rest_day(name: str) -> bool:
    """Saturday and Sunday are rest days."""
    return name in REST_DAYS


def parse_weight(value: Optional[str]) -> float:
    """Convert a weight entry to a float, returning 0 for empty or invalid input."""
    try:
        weight = float(value) if value not in (None, "") else 0.0
    except (TypeError, ValueError):
        return 0.0
    return weight if weight == weight else 0.0  # NaN
