"""Suitability scoring - pure functions from (requirements, weather) to an analysis."""
import math
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional, Union
from weather_data import DailyWeatherRecord, InvalidWeatherRecord, WeatherCondition
from event_requirements import EventRequirements, requirements_for

MAX_SCORE = 110


class FactorStatus(str, Enum):
    PERFECT = "Perfect"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


class Rating(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    OKAY = "Okay"
    POOR = "Poor"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class FactorResult:
    score: int
    status: FactorStatus
    message: str
    value: Union[float, str]
    unit: str = ""
    precipitation_mm: Optional[float] = None  # only set on the precipitation factor


@dataclass(frozen=True)
class SuitabilityAnalysis:
    temperature: FactorResult
    precipitation: FactorResult
    wind: FactorResult
    conditions: FactorResult
    score: int
    rating: Rating
    recommendations: List[str]
    weather: DailyWeatherRecord
    event_id: Optional[str] = None
    event_name: Optional[str] = None
    event_type: Optional[str] = None
    location: Optional[str] = None
    event_date: Optional[date] = None
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def factors(self) -> List[FactorResult]:
        """Factors in fixed order: temperature, precipitation, wind, conditions."""
        return [self.temperature, self.precipitation, self.wind, self.conditions]


def analyze_temperature(temp: float, req: EventRequirements) -> FactorResult:
    name = req.name.lower()
    if req.min_temp <= temp <= req.max_temp:
        return FactorResult(30, FactorStatus.PERFECT, f"Temperature {temp}°C is ideal for {name}", temp, "°C")
    if req.min_temp - 5 <= temp <= req.max_temp + 5:
        return FactorResult(20, FactorStatus.GOOD, f"Temperature {temp}°C is acceptable for {name}", temp, "°C")
    if req.min_temp - 10 <= temp <= req.max_temp + 10:
        return FactorResult(10, FactorStatus.FAIR, f"Temperature {temp}°C is manageable but not ideal", temp, "°C")
    verdict = "too cold" if temp < req.min_temp else "too hot"
    return FactorResult(0, FactorStatus.POOR, f"Temperature {temp}°C is {verdict} for outdoor events", temp, "°C")


def analyze_precipitation(probability: float, amount: float, req: EventRequirements) -> FactorResult:
    """Score rain risk. The probability decides; the amount is carried for display."""
    if probability <= req.max_precipitation and probability <= 10:
        points, status = 30, FactorStatus.PERFECT
        message = "Minimal chance of rain - perfect for outdoor events"
    elif probability <= req.max_precipitation:
        points, status = 25, FactorStatus.GOOD
        message = f"Low chance of rain ({probability}%) - good for outdoor events"
    elif probability <= req.max_precipitation + 20:
        points, status = 15, FactorStatus.FAIR
        message = f"Moderate chance of rain ({probability}%) - have backup plans ready"
    else:
        points, status = 0, FactorStatus.POOR
        message = f"High chance of rain ({probability}%) - consider rescheduling or indoor alternatives"
    return FactorResult(points, status, message, probability, "%", precipitation_mm=amount)


def analyze_wind(speed: float, req: EventRequirements) -> FactorResult:
    if speed <= req.max_wind_speed and speed <= 10:
        return FactorResult(25, FactorStatus.PERFECT, "Light winds - ideal conditions", speed, "km/h")
    if speed <= req.max_wind_speed:
        return FactorResult(20, FactorStatus.GOOD,
                            f"Moderate winds ({speed} km/h) - acceptable for most activities", speed, "km/h")
    if speed <= req.max_wind_speed + 10:
        return FactorResult(10, FactorStatus.FAIR,
                            f"Strong winds ({speed} km/h) - may affect some activities", speed, "km/h")
    return FactorResult(0, FactorStatus.POOR,
                        f"Very strong winds ({speed} km/h) - not recommended for outdoor events", speed, "km/h")


def analyze_conditions(label: str, req: EventRequirements) -> FactorResult:
    condition = WeatherCondition.from_label(label)
    if condition in req.preferred_conditions and condition is WeatherCondition.CLEAR:
        return FactorResult(25, FactorStatus.PERFECT, "Clear skies - perfect weather conditions", label)
    if condition in req.preferred_conditions:
        return FactorResult(20, FactorStatus.GOOD, f"{label} conditions - good for outdoor events", label)
    if condition in (WeatherCondition.MIST, WeatherCondition.FOG):
        return FactorResult(10, FactorStatus.FAIR,
                            f"{label} conditions - reduced visibility but manageable", label)
    return FactorResult(0, FactorStatus.POOR, f"{label} conditions - not ideal for outdoor events", label)


def rating_for(score: int) -> Rating:
    """Rating bucket: >=80 Excellent, >=60 Good, >=40 Okay, else Poor."""
    if score >= 80:
        return Rating.EXCELLENT
    if score >= 60:
        return Rating.GOOD
    if score >= 40:
        return Rating.OKAY
    return Rating.POOR


def generate_recommendations(
    temperature: FactorResult,
    precipitation: FactorResult,
    wind: FactorResult,
    conditions: FactorResult,
    req: EventRequirements
) -> List[str]:
    """
    Build advice from factor statuses.

    Categories always appear in the order temperature, precipitation,
    wind, conditions. When nothing needs attention a short confirmation
    is returned instead.
    """
    recommendations = []
    fair_or_poor = (FactorStatus.FAIR, FactorStatus.POOR)

    if temperature.status is FactorStatus.POOR:
        if temperature.value < req.min_temp:
            recommendations.append("Consider warmer clothing or heating arrangements")
            recommendations.append("Schedule the event during warmer parts of the day (noon-afternoon)")
        else:
            recommendations.append("Provide shade and cooling arrangements")
            recommendations.append("Consider morning or evening timing to avoid peak heat")

    if precipitation.status in fair_or_poor:
        recommendations.append("Have covered areas or tents ready")
        recommendations.append("Consider indoor backup venue")
        recommendations.append("Inform attendees to bring rain gear")

    if wind.status in fair_or_poor:
        recommendations.append("Secure all decorations and equipment")
        recommendations.append("Consider windbreaks or sheltered areas")
        recommendations.append("Inform attendees about windy conditions")

    if conditions.status is FactorStatus.POOR:
        recommendations.append("Monitor weather updates closely")
        recommendations.append("Have contingency plans ready")
        recommendations.append("Consider postponing if conditions worsen")

    if not recommendations:
        recommendations.append("Weather conditions look great for your event!")
        recommendations.append("Continue with your planned arrangements")

    return recommendations


def _check_record(record: DailyWeatherRecord) -> None:
    if record is None:
        raise InvalidWeatherRecord("Weather record is required")
    for name in ("temperature", "precipitation_probability", "precipitation", "wind_speed"):
        value = getattr(record, name, None)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise InvalidWeatherRecord(f"Weather record field {name} is missing or not finite: {value!r}")
    if not getattr(record, "condition_main", None):
        raise InvalidWeatherRecord("Weather record field condition_main is missing")


def score(requirements: EventRequirements, record: DailyWeatherRecord) -> SuitabilityAnalysis:
    """
    Score a daily weather record against an event type's requirements.

    Args:
        requirements: Tolerances of the event type
        record: Daily weather for the event's location and date

    Returns:
        SuitabilityAnalysis with four factors, total (0-110), rating and advice

    Raises:
        InvalidWeatherRecord: If the record is missing fields or holds non-finite values
    """
    _check_record(record)
    temperature = analyze_temperature(record.temperature, requirements)
    precipitation = analyze_precipitation(record.precipitation_probability, record.precipitation, requirements)
    wind = analyze_wind(record.wind_speed, requirements)
    conditions = analyze_conditions(record.condition_main, requirements)

    total = temperature.score + precipitation.score + wind.score + conditions.score
    return SuitabilityAnalysis(
        temperature=temperature,
        precipitation=precipitation,
        wind=wind,
        conditions=conditions,
        score=total,
        rating=rating_for(total),
        recommendations=generate_recommendations(temperature, precipitation, wind, conditions, requirements),
        weather=record,
    )


def analyze(event, record: DailyWeatherRecord) -> SuitabilityAnalysis:
    """Score weather for an event (anything with id, name, event_type, location, date)."""
    return replace(
        score(requirements_for(event.event_type), record),
        event_id=event.id,
        event_name=event.name,
        event_type=event.event_type,
        location=event.location,
        event_date=event.date,
    )
