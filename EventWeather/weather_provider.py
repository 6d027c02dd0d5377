"""Weather provider abstraction - allows swapping different weather APIs."""
from abc import ABC, abstractmethod
from typing import List
from weather_data import RawTimeslot


class WeatherProviderBase(ABC):
    """Abstract base class for weather data providers."""

    @abstractmethod
    def fetch_current(self, location: str) -> RawTimeslot:
        """
        Fetch current weather for a location.

        Args:
            location: Free-form location query (e.g., "London,GB")

        Returns:
            RawTimeslot: Current observation

        Raises:
            WeatherProviderError: If the provider fails to fetch data
        """
        pass

    @abstractmethod
    def fetch_forecast_window(self, location: str, days: int) -> List[RawTimeslot]:
        """
        Fetch forecast timeslots covering the next `days` days.

        Args:
            location: Free-form location query
            days: Number of days of forecast to request

        Returns:
            List of RawTimeslot in provider order

        Raises:
            WeatherProviderError: If the provider fails to fetch data
        """
        pass


class WeatherProviderError(Exception):
    """Exception raised when a weather provider fails."""
    pass


class ProviderUnavailable(WeatherProviderError):
    """Provider unreachable, timed out, or returned an unusable response."""
    pass


class LocationNotFound(WeatherProviderError):
    """Provider does not know the requested location."""
    pass


class RateLimited(WeatherProviderError):
    """Provider rejected the request because of rate limiting."""
    pass


class AuthFailed(WeatherProviderError):
    """Provider rejected the API key."""
    pass
