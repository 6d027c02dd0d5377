"""Weather domain model - pure data structures independent of any API."""
import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional


class InvalidWeatherRecord(ValueError):
    """Raised when a weather record is missing fields or holds impossible values."""
    pass


class WeatherCondition(str, Enum):
    """Primary condition groups reported by the provider."""
    CLEAR = "Clear"
    CLOUDS = "Clouds"
    RAIN = "Rain"
    DRIZZLE = "Drizzle"
    MIST = "Mist"
    FOG = "Fog"
    SNOW = "Snow"
    THUNDERSTORM = "Thunderstorm"
    OTHER = "Other"

    @classmethod
    def from_label(cls, label: str) -> "WeatherCondition":
        for condition in cls:
            if condition.value.lower() == (label or "").strip().lower():
                return condition
        return cls.OTHER


@dataclass(frozen=True)
class RawTimeslot:
    """One provider sample (a 3-hour forecast slot or a current observation)."""
    timestamp: int  # UNIX timestamp (UTC)
    timezone_offset: int  # Offset of the location from UTC in seconds
    temp: float
    humidity: float
    wind_speed: float  # m/s, as delivered by the provider
    condition_main: str  # e.g., "Clouds", "Rain", "Clear"
    condition_description: str  # e.g., "broken clouds", "light rain"
    precipitation: float = 0.0  # mm during the slot
    cloudiness: float = 0.0  # percentage
    feels_like: Optional[float] = None
    location: str = ""
    country: Optional[str] = None

    def local_date(self) -> date:
        """Calendar date of this slot at the location."""
        return datetime.fromtimestamp(self.timestamp + self.timezone_offset, tz=timezone.utc).date()


@dataclass(frozen=True)
class DailyWeatherRecord:
    """Aggregated weather for one location and calendar date."""
    location: str
    date: date
    temperature: float  # mean, °C
    min_temperature: float
    max_temperature: float
    humidity: float  # percentage
    wind_speed: float  # km/h
    precipitation_probability: float  # percentage of slots with precipitation
    precipitation: float  # accumulated mm
    condition_main: str
    condition_description: str
    retrieved_at: datetime
    cloudiness: float = 0.0
    country: Optional[str] = None

    def __post_init__(self):
        self.validate()

    @property
    def condition(self) -> WeatherCondition:
        return WeatherCondition.from_label(self.condition_main)

    def validate(self) -> None:
        """
        Check the record invariants.

        Raises:
            InvalidWeatherRecord: If a numeric field is missing, non-finite or out of range
        """
        for name in ("temperature", "min_temperature", "max_temperature",
                     "humidity", "wind_speed", "precipitation_probability", "precipitation"):
            value = getattr(self, name, None)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidWeatherRecord(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise InvalidWeatherRecord(f"{name} must be finite, got {value!r}")

        for name in ("humidity", "precipitation_probability"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise InvalidWeatherRecord(f"{name} must be within 0-100, got {value}")

        if self.wind_speed < 0 or self.precipitation < 0:
            raise InvalidWeatherRecord("wind_speed and precipitation cannot be negative")
        if not isinstance(self.date, date):
            raise InvalidWeatherRecord(f"date must be a calendar date, got {self.date!r}")
        if not self.condition_main:
            raise InvalidWeatherRecord("condition_main is required")
