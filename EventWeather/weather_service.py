"""Weather service with date resolution and caching."""
import logging
from datetime import date
from typing import Callable, Dict, Optional, Tuple
from weather_provider import WeatherProviderBase
from weather_data import DailyWeatherRecord
from weather_cache import WeatherCache, make_key
from forecast_normalizer import normalize_current, normalize_forecast
from date_resolver import (
    LookupKind, UnsupportedDateRange, WeatherLookupError, classify, today_in, MAX_HORIZON_DAYS
)


class ForecastNotAvailable(WeatherLookupError):
    """The provider forecast holds no record for the requested date."""
    pass


class WeatherService:
    """
    Service that wraps a weather provider with caching and date resolution.

    Prevents hammering the API by caching normalized results per
    (location, kind) for the cache TTL (default: 3 hours). Provider
    failures are never cached and never retried; they propagate to the caller.
    """

    def __init__(
        self,
        provider: WeatherProviderBase,
        cache: Optional[WeatherCache] = None,
        tz_name: str = "UTC",
        forecast_days: int = MAX_HORIZON_DAYS,
        today: Optional[Callable[[], date]] = None
    ):
        """
        Initialize weather service.

        Args:
            provider: Weather provider to use
            cache: Cache shared by all lookups (default: a new 3-hour cache)
            tz_name: Reference timezone deciding what "today" is
            forecast_days: Days of forecast requested from the provider
            today: Override for the reference date (used by tests)
        """
        self.provider = provider
        self.cache = cache if cache is not None else WeatherCache()
        self.tz_name = tz_name
        self.forecast_days = forecast_days
        self._today = today or (lambda: today_in(self.tz_name))

    def today(self) -> date:
        return self._today()

    def get_current(self, location: str) -> DailyWeatherRecord:
        """
        Get current conditions for a location, using cache if still fresh.

        Raises:
            WeatherProviderError: If the provider fails
        """
        key = make_key(location, LookupKind.CURRENT.value)
        return self.cache.get_or_load(key, lambda: self._fetch_current(location))

    def _fetch_current(self, location: str) -> DailyWeatherRecord:
        logging.info(f"Fetching current weather for {location}...")
        record = normalize_current(self.provider.fetch_current(location))
        logging.info(f"Fetched current weather for {location}: {record.temperature}°C, {record.condition_main}")
        return record

    def get_forecast(self, location: str, days: Optional[int] = None) -> Tuple[DailyWeatherRecord, ...]:
        """
        Get the normalized daily forecast for a location, using cache if still fresh.

        Args:
            location: City query passed to the provider
            days: Forecast length, 1..5 (default: the service's forecast_days)

        Raises:
            UnsupportedDateRange: If days is outside 1..5
            WeatherProviderError: If the provider fails
            EmptyForecastData: If the provider returned no timeslots
        """
        if days is None:
            days = self.forecast_days
        if not 1 <= days <= MAX_HORIZON_DAYS:
            raise UnsupportedDateRange(f"Forecast length must be between 1 and {MAX_HORIZON_DAYS} days, got {days}")
        key = make_key(location, LookupKind.FORECAST.value, days)
        return self.cache.get_or_load(key, lambda: self._fetch_forecast(location, days))

    def _fetch_forecast(self, location: str, days: int) -> Tuple[DailyWeatherRecord, ...]:
        logging.info(f"Fetching {days}-day forecast for {location}...")
        slots = self.provider.fetch_forecast_window(location, days)
        records = tuple(normalize_forecast(slots))
        logging.info(f"Fetched forecast for {location}: {len(records)} days from {len(slots)} timeslots")
        return records

    def get_weather_for_date(self, location: str, requested: date) -> DailyWeatherRecord:
        """
        Get the daily record for a location on a calendar date.

        Today is served from current conditions, the next 5 days from the
        forecast.

        Raises:
            UnsupportedDateRange: If the date is outside today..today+5
            ForecastNotAvailable: If the forecast does not cover the date
            WeatherProviderError: If the provider fails
        """
        resolution = classify(requested, today=self.today())
        if resolution.kind is LookupKind.CURRENT:
            return self.get_current(location)

        for record in self.get_forecast(location):
            if record.date == requested:
                return record
        raise ForecastNotAvailable(f"No forecast available for date: {requested.isoformat()}")

    def cache_stats(self) -> Dict[str, int]:
        return self.cache.stats()
