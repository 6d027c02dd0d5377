"""Weather tolerances per event type."""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple, Union
from weather_data import WeatherCondition


class EventType(str, Enum):
    OUTDOOR_SPORTS = "outdoor_sports"
    WEDDING = "wedding"
    HIKING = "hiking"
    CORPORATE_OUTDOOR = "corporate_outdoor"
    GENERAL = "general"

    @classmethod
    def parse(cls, value: Union[str, "EventType", None]) -> "EventType":
        """Map a raw event type string onto the enum, falling back to GENERAL."""
        if isinstance(value, cls):
            return value
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            logging.debug(f"Unknown event type {value!r}, using general requirements")
            return cls.GENERAL


@dataclass(frozen=True)
class EventRequirements:
    name: str
    min_temp: float
    max_temp: float
    max_precipitation: float  # probability, %
    max_wind_speed: float  # km/h
    preferred_conditions: Tuple[WeatherCondition, ...]


_CLEAR_OR_CLOUDS = (WeatherCondition.CLEAR, WeatherCondition.CLOUDS)

REQUIREMENTS: Dict[EventType, EventRequirements] = {
    EventType.OUTDOOR_SPORTS: EventRequirements(
        name="Outdoor Sports",
        min_temp=15, max_temp=30,
        max_precipitation=20, max_wind_speed=20,
        preferred_conditions=_CLEAR_OR_CLOUDS,
    ),
    EventType.WEDDING: EventRequirements(
        name="Wedding/Formal Event",
        min_temp=18, max_temp=28,
        max_precipitation=10, max_wind_speed=15,
        preferred_conditions=_CLEAR_OR_CLOUDS,
    ),
    EventType.HIKING: EventRequirements(
        name="Hiking/Outdoor Adventure",
        min_temp=10, max_temp=25,
        max_precipitation=30, max_wind_speed=25,
        preferred_conditions=_CLEAR_OR_CLOUDS + (WeatherCondition.MIST,),
    ),
    EventType.CORPORATE_OUTDOOR: EventRequirements(
        name="Corporate Outdoor Event",
        min_temp=16, max_temp=26,
        max_precipitation=15, max_wind_speed=18,
        preferred_conditions=_CLEAR_OR_CLOUDS,
    ),
    EventType.GENERAL: EventRequirements(
        name="General Outdoor Event",
        min_temp=15, max_temp=28,
        max_precipitation=25, max_wind_speed=20,
        preferred_conditions=_CLEAR_OR_CLOUDS,
    ),
}


def requirements_for(event_type: Union[str, EventType, None]) -> EventRequirements:
    """Requirements for an event type; unrecognized types get the general profile."""
    return REQUIREMENTS[EventType.parse(event_type)]
