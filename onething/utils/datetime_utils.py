# onething/utils/datetime_utils.py

from datetime import datetime, date, time, timedelta
from typing import Optional, Tuple, Union

import pytz

from onething.config import config


def get_timezone(name: Optional[str] = None):
    return pytz.timezone(name or config.timezone)


def now_local(tz_name: Optional[str] = None) -> datetime:
    return datetime.now(get_timezone(tz_name))


def local_date_str(value: Union[datetime, date]) -> str:
    """Canonical YYYY-MM-DD key for a calendar day"""
    if isinstance(value, datetime):
        value = value.date()
    return value.strftime("%Y-%m-%d")


def today_str(now: Optional[datetime] = None) -> str:
    return local_date_str(now or now_local())


def yesterday_str(today: Optional[Union[datetime, date]] = None) -> str:
    if today is None:
        today = now_local()
    if isinstance(today, datetime):
        today = today.date()
    return local_date_str(today - timedelta(days=1))


def parse_date(date_str: str, fmt: str = "%Y-%m-%d") -> date:
    return datetime.strptime(date_str, fmt).date()


def parse_time(time_str: str) -> Tuple[int, int]:
    """'HH:MM' -> (hour, minute); raises ValueError on anything else"""
    hour_str, sep, minute_str = time_str.partition(":")
    if (not sep or not hour_str.isdigit() or not minute_str.isdigit()
            or len(hour_str) != 2 or len(minute_str) != 2):
        raise ValueError(f"Invalid time {time_str!r}, expected HH:MM")
    hour, minute = int(hour_str), int(minute_str)
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Invalid time {time_str!r}, expected HH:MM")
    return hour, minute


def time_to_minutes(time_str: str) -> int:
    hour, minute = parse_time(time_str)
    return hour * 60 + minute


def minutes_between(first: str, second: str) -> int:
    """Absolute distance in minutes between two HH:MM times of the same day"""
    return abs(time_to_minutes(first) - time_to_minutes(second))


def is_at_or_after(time_str: str, cutoff: str) -> bool:
    return time_to_minutes(time_str) >= time_to_minutes(cutoff)


def seconds_until(time_str: str, now: datetime) -> int:
    """Seconds from ``now`` until ``time_str`` on the same local day.

    Negative or zero when the time has already passed. Across a DST change
    the target keeps its own UTC offset, so the delay lands on the wall-clock
    time.
    """
    hour, minute = parse_time(time_str)
    wall = datetime.combine(now.date(), time(hour, minute))
    zone = getattr(now.tzinfo, 'zone', None)
    if zone is not None:
        target = pytz.timezone(zone).localize(wall)
    else:
        target = wall.replace(tzinfo=now.tzinfo)
    return int((target - now).total_seconds())


def format_time_12h(time_str: str) -> str:
    hour, minute = parse_time(time_str)
    suffix = "PM" if hour >= 12 else "AM"
    if hour == 0:
        hour = 12
    elif hour > 12:
        hour -= 12
    return f"{hour}:{minute:02d} {suffix}"
