"""Decide whether a date is served from current conditions or the forecast."""
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional
from zoneinfo import ZoneInfo

MAX_HORIZON_DAYS = 5


class WeatherLookupError(Exception):
    """Base class for lookups that cannot be served locally."""
    pass


class UnsupportedDateRange(WeatherLookupError):
    """Requested date is in the past or beyond the forecast horizon."""
    pass


class LookupKind(str, Enum):
    CURRENT = "current"
    FORECAST = "forecast"


@dataclass(frozen=True)
class DateResolution:
    kind: LookupKind
    horizon_days: int


def today_in(tz_name: str = "UTC") -> date:
    """Current calendar date in the given IANA timezone."""
    return datetime.now(ZoneInfo(tz_name)).date()


def classify(requested: date, today: Optional[date] = None, tz_name: str = "UTC") -> DateResolution:
    """
    Classify a requested date against the supported horizon.

    Args:
        requested: Calendar date of interest
        today: Reference date (default: today in tz_name)
        tz_name: Reference timezone used when today is not given

    Returns:
        DateResolution with kind CURRENT (horizon 0) or FORECAST (1-5 days)

    Raises:
        UnsupportedDateRange: For past dates and dates more than 5 days ahead
    """
    today = today or today_in(tz_name)
    horizon = (requested - today).days
    if horizon == 0:
        return DateResolution(LookupKind.CURRENT, 0)
    if 1 <= horizon <= MAX_HORIZON_DAYS:
        return DateResolution(LookupKind.FORECAST, horizon)
    raise UnsupportedDateRange(
        f"Weather data only available for current day and next {MAX_HORIZON_DAYS} days "
        f"(requested {requested.isoformat()}, today {today.isoformat()})"
    )
