"""Text rendering of analyses - pure functions for testability."""
from typing import List, Sequence
from suitability import SuitabilityAnalysis
from event_planner import AlternativeDate, WeatherStatus
from weather_data import DailyWeatherRecord


def format_analysis(analysis: SuitabilityAnalysis) -> List[str]:
    """
    Render an analysis as printable lines.

    Args:
        analysis: Result of scoring an event

    Returns:
        Header, weather summary, one line per factor, then recommendations
    """
    weather = analysis.weather
    header = f"{analysis.event_name or 'Event'} ({analysis.event_type or 'general'})"
    if analysis.location and analysis.event_date:
        header += f" - {analysis.location}, {analysis.event_date.isoformat()}"

    lines = [
        header,
        f"Suitability: {analysis.score} ({analysis.rating.value})",
        f"Weather: {weather.temperature}°C ({weather.min_temperature}..{weather.max_temperature}), "
        f"{weather.condition_description or weather.condition_main}, "
        f"rain {weather.precipitation_probability}%, wind {weather.wind_speed} km/h",
    ]
    for label, factor in zip(("Temperature", "Precipitation", "Wind", "Conditions"), analysis.factors):
        lines.append(f"  {label:<14}{factor.score:>3}  {factor.status.value:<8}{factor.message}")
    lines.append("Recommendations:")
    lines.extend(f"  - {text}" for text in analysis.recommendations)
    return lines


def format_status(status: WeatherStatus) -> str:
    if status.error:
        return f"Suitability: {status.rating.value} ({status.error})"
    return f"Suitability: {status.score} ({status.rating.value}), {status.temperature}°C, {status.conditions}"


def format_alternatives(alternatives: List[AlternativeDate]) -> List[str]:
    """One line per alternative date, best first."""
    if not alternatives:
        return ["No alternative dates with available weather"]
    lines = ["Alternative dates:"]
    for alt in alternatives:
        lines.append(
            f"  {alt.date.isoformat()} {alt.day_of_week:<9} {alt.score:>3} {alt.rating.value:<9} "
            f"{alt.weather.temperature}°C, rain {alt.weather.precipitation_probability}%, "
            f"wind {alt.weather.wind_speed} km/h, {alt.weather.conditions}"
        )
    return lines


def format_forecast(records: Sequence[DailyWeatherRecord]) -> List[str]:
    lines = ["Forecast:"]
    for record in records:
        lines.append(
            f"  {record.date.isoformat()} {record.min_temperature}..{record.max_temperature}°C, "
            f"rain {record.precipitation_probability}%, wind {record.wind_speed} km/h, "
            f"{record.condition_description or record.condition_main}"
        )
    return lines
