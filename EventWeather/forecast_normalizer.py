"""Turn provider timeslots into one aggregated record per calendar day."""
import math
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional
from weather_data import DailyWeatherRecord, RawTimeslot

MS_TO_KMH = 3.6


class EmptyForecastData(ValueError):
    """Raised when there are no timeslots to normalize."""
    pass


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _mean(values: List[float]) -> float:
    return sum(values) / len(values)


def dominant_condition(slots: List[RawTimeslot]) -> RawTimeslot:
    """
    Pick the slot carrying the most frequent condition label.

    Ties go to the label seen first; the returned slot is the first one
    with that label so its description can be reused.
    """
    counts = Counter(slot.condition_main for slot in slots)
    best = max(counts.values())
    for slot in slots:
        if counts[slot.condition_main] == best:
            return slot
    raise EmptyForecastData("No timeslots to pick a condition from")


def _aggregate_day(slots: List[RawTimeslot], retrieved_at: datetime) -> DailyWeatherRecord:
    temps = [slot.temp for slot in slots]
    rainy = sum(1 for slot in slots if slot.precipitation > 0)
    dominant = dominant_condition(slots)
    first = slots[0]

    return DailyWeatherRecord(
        location=first.location,
        country=first.country,
        date=first.local_date(),
        temperature=round_half_up(_mean(temps)),
        min_temperature=round_half_up(min(temps)),
        max_temperature=round_half_up(max(temps)),
        humidity=round_half_up(_mean([slot.humidity for slot in slots])),
        wind_speed=round_half_up(_mean([slot.wind_speed * MS_TO_KMH for slot in slots])),
        cloudiness=round_half_up(_mean([slot.cloudiness for slot in slots])),
        precipitation=round(sum(slot.precipitation for slot in slots), 2),
        precipitation_probability=round_half_up(100 * rainy / len(slots)),
        condition_main=dominant.condition_main,
        condition_description=dominant.condition_description,
        retrieved_at=retrieved_at,
    )


def normalize_forecast(
    slots: Iterable[RawTimeslot],
    retrieved_at: Optional[datetime] = None
) -> List[DailyWeatherRecord]:
    """
    Group forecast timeslots by local calendar date and aggregate each day.

    Args:
        slots: Provider timeslots, possibly spanning several dates
        retrieved_at: Retrieval timestamp stamped on every record (default: now, UTC)

    Returns:
        One DailyWeatherRecord per date, in ascending date order

    Raises:
        EmptyForecastData: If no timeslots were given
    """
    by_date: Dict = {}
    for slot in slots:
        by_date.setdefault(slot.local_date(), []).append(slot)

    if not by_date:
        raise EmptyForecastData("Forecast contained no timeslots")

    retrieved_at = retrieved_at or datetime.now(timezone.utc)
    return [_aggregate_day(by_date[day], retrieved_at) for day in sorted(by_date)]


def normalize_current(slot: RawTimeslot, retrieved_at: Optional[datetime] = None) -> DailyWeatherRecord:
    """
    Convert a current observation into a daily record.

    Current conditions carry no probability of precipitation, so it is
    reported as 0 and min/max collapse onto the observed temperature.
    """
    temp = round_half_up(slot.temp)
    return DailyWeatherRecord(
        location=slot.location,
        country=slot.country,
        date=slot.local_date(),
        temperature=temp,
        min_temperature=temp,
        max_temperature=temp,
        humidity=round_half_up(slot.humidity),
        wind_speed=round_half_up(slot.wind_speed * MS_TO_KMH),
        cloudiness=round_half_up(slot.cloudiness),
        precipitation=slot.precipitation,
        precipitation_probability=0,
        condition_main=slot.condition_main,
        condition_description=slot.condition_description,
        retrieved_at=retrieved_at or datetime.now(timezone.utc),
    )
