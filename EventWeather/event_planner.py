"""Service-facing operations: analyze an event, report its status, search better dates."""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import List, Optional, Tuple
from weather_provider import WeatherProviderError
from weather_service import WeatherService
from date_resolver import WeatherLookupError
from forecast_normalizer import EmptyForecastData
from weather_data import InvalidWeatherRecord
from suitability import Rating, SuitabilityAnalysis, analyze

DEFAULT_WINDOW_DAYS = 7
DEFAULT_MAX_WORKERS = 4

# Failures that only cost one date, never the whole request.
LOOKUP_FAILURES = (WeatherLookupError, WeatherProviderError, EmptyForecastData, InvalidWeatherRecord)


@dataclass(frozen=True)
class WeatherSummary:
    temperature: float
    precipitation_probability: float
    wind_speed: float
    conditions: str


@dataclass(frozen=True)
class AlternativeDate:
    date: date
    day_of_week: str
    score: int
    rating: Rating
    weather: WeatherSummary


@dataclass(frozen=True)
class WeatherStatus:
    rating: Rating
    score: Optional[int] = None
    temperature: Optional[float] = None
    conditions: Optional[str] = None
    error: Optional[str] = None


def analyze_event(event, service: WeatherService) -> SuitabilityAnalysis:
    """
    Look up weather for the event's own date, score it and store the
    result on event.weather_analysis.

    Raises:
        WeatherLookupError: If the date is outside the horizon or not in the forecast
        WeatherProviderError: If the provider fails
    """
    record = service.get_weather_for_date(event.location, event.date)
    analysis = analyze(event, record)
    event.weather_analysis = analysis
    return analysis


def weather_status(event, service: WeatherService) -> WeatherStatus:
    """Short suitability status for an event; Unknown when weather is unavailable."""
    if event.analysis_is_current():
        analysis = event.weather_analysis
    else:
        try:
            analysis = analyze_event(event, service)
        except LOOKUP_FAILURES as e:
            logging.warning(f"Weather analysis failed for event {event.id}: {e}")
            return WeatherStatus(rating=Rating.UNKNOWN, error="Weather data unavailable")
    return WeatherStatus(
        rating=analysis.rating,
        score=analysis.score,
        temperature=analysis.weather.temperature,
        conditions=analysis.weather.condition_description,
    )


def _score_candidate(event, service: WeatherService, candidate: date) -> AlternativeDate:
    record = service.get_weather_for_date(event.location, candidate)
    analysis = replace(analyze(event, record), event_date=candidate)
    return AlternativeDate(
        date=candidate,
        day_of_week=candidate.strftime("%A"),
        score=analysis.score,
        rating=analysis.rating,
        weather=WeatherSummary(
            temperature=record.temperature,
            precipitation_probability=record.precipitation_probability,
            wind_speed=record.wind_speed,
            conditions=record.condition_description,
        ),
    )


def find_alternatives(
    event,
    service: WeatherService,
    window_days: int = DEFAULT_WINDOW_DAYS,
    max_workers: int = DEFAULT_MAX_WORKERS
) -> List[AlternativeDate]:
    """
    Score the days after the event date and rank them.

    Candidates are event.date + 1 .. event.date + window_days. Lookups run
    on a bounded thread pool; a candidate whose lookup fails is logged and
    left out. Results are ordered by score, highest first, with ties kept
    in date order.

    Args:
        event: Event with location, date and event_type
        service: Weather service used for every candidate
        window_days: Number of days after the event date to try
        max_workers: Upper bound on concurrent lookups

    Returns:
        Ranked alternatives (empty if every candidate failed)
    """
    if window_days < 1:
        return []

    candidates = [event.date + timedelta(days=offset) for offset in range(1, window_days + 1)]
    scored: List[Tuple[int, AlternativeDate]] = []

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(candidates)))) as executor:
        futures = {
            executor.submit(_score_candidate, event, service, candidate): index
            for index, candidate in enumerate(candidates)
        }
        for future in as_completed(futures):
            index = futures[future]
            try:
                scored.append((index, future.result()))
            except LOOKUP_FAILURES as e:
                logging.warning(f"Could not get weather for {candidates[index].isoformat()}: {e}")

    # Completion order is arbitrary; restore date order so the stable sort keeps ties chronological.
    scored.sort(key=lambda item: item[0])
    alternatives = [alternative for _, alternative in scored]
    alternatives.sort(key=lambda alternative: alternative.score, reverse=True)
    logging.info(f"Found {len(alternatives)} alternative dates for event {event.id} out of {window_days} tried")
    return alternatives
