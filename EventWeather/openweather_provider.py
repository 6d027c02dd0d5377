"""OpenWeather Current Weather and 5 day / 3 hour Forecast API provider implementation."""
import logging
import requests
from typing import Any, Dict, List
from weather_provider import (
    WeatherProviderBase,
    WeatherProviderError,
    ProviderUnavailable,
    LocationNotFound,
    RateLimited,
    AuthFailed,
)
from weather_data import RawTimeslot

SLOTS_PER_DAY = 8  # forecast slots are 3 hours apart


class OpenWeatherProvider(WeatherProviderBase):
    """
    Weather provider using the free OpenWeather APIs.

    Current conditions: https://openweathermap.org/current
    Forecast (5 day / 3 hour): https://openweathermap.org/forecast5
    Locations are free-form city queries ("London", "Paris,FR").
    """

    BASE_URL = "https://api.openweathermap.org/data/2.5"

    def __init__(
        self,
        api_key: str,
        units: str = "metric",
        lang: str = "en",
        timeout: int = 10
    ):
        """
        Initialize OpenWeather provider.

        Args:
            api_key: OpenWeather API key
            units: Temperature units ("metric", "imperial", or "standard")
            lang: Language code for descriptions (e.g., "en", "de")
            timeout: HTTP request timeout in seconds
        """
        self.api_key = api_key
        self.units = units
        self.lang = lang
        self.timeout = timeout

    def fetch_current(self, location: str) -> RawTimeslot:
        """
        Fetch current weather from OpenWeather Current Weather API.

        Raises:
            WeatherProviderError: If the API request fails
        """
        data = self._get("weather", {"q": location})
        try:
            return self._parse_slot(data, location=data.get("name") or location,
                                    country=(data.get("sys") or {}).get("country"),
                                    timezone_offset=data.get("timezone", 0))
        except (KeyError, ValueError, TypeError) as e:
            logging.error(f"Failed to parse API response: {e}", exc_info=True)
            raise ProviderUnavailable(f"Failed to parse response: {str(e)}")

    def fetch_forecast_window(self, location: str, days: int) -> List[RawTimeslot]:
        """
        Fetch 3-hour forecast slots covering `days` days.

        Raises:
            WeatherProviderError: If the API request fails
        """
        data = self._get("forecast", {"q": location, "cnt": days * SLOTS_PER_DAY})
        city = data.get("city") or {}
        items = data.get("list")
        if items is None:
            logging.error("Response missing 'list' array")
            raise ProviderUnavailable("Response missing 'list' array")

        try:
            return [
                self._parse_slot(item, location=city.get("name") or location,
                                 country=city.get("country"),
                                 timezone_offset=city.get("timezone", 0))
                for item in items
            ]
        except (KeyError, ValueError, TypeError) as e:
            logging.error(f"Failed to parse API response: {e}", exc_info=True)
            raise ProviderUnavailable(f"Failed to parse response: {str(e)}")

    def _get(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.BASE_URL}/{endpoint}"
        params = dict(params, appid=self.api_key, units=self.units, lang=self.lang)

        try:
            logging.info(f"Making OpenWeather API request: {url}")
            logging.debug(f"Request parameters: q={params.get('q')}, units={self.units}, lang={self.lang}")

            response = requests.get(url, params=params, timeout=self.timeout)

            logging.info(f"API response status: {response.status_code}")

            if not response.ok:
                logging.error(f"API request failed with status {response.status_code}")
                self._handle_error_response(response)

            data = response.json()
            logging.debug(f"API response (truncated): {str(data)[:500]}...")
            return data
        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during API request: {e}")
            raise ProviderUnavailable(f"Weather service is currently unavailable: {str(e)}")
        except ValueError as e:
            logging.error(f"Failed to decode API response: {e}")
            raise ProviderUnavailable(f"Failed to parse response: {str(e)}")

    @staticmethod
    def _parse_slot(item: Dict[str, Any], location: str, country, timezone_offset: int) -> RawTimeslot:
        weather_array = item.get("weather") or []
        if not weather_array:
            raise ProviderUnavailable("Response missing 'weather' array")
        weather = weather_array[0]

        main_data = item.get("main")
        if not main_data:
            raise ProviderUnavailable("Response missing 'main' block")

        # Forecast slots report 3h totals, current conditions 1h
        rain = item.get("rain") or {}
        snow = item.get("snow") or {}
        precipitation = (rain.get("3h") or rain.get("1h") or 0.0) + (snow.get("3h") or snow.get("1h") or 0.0)

        wind_data = item.get("wind") or {}
        clouds_data = item.get("clouds") or {}

        return RawTimeslot(
            timestamp=int(item["dt"]),
            timezone_offset=int(timezone_offset or 0),
            temp=float(main_data["temp"]),
            feels_like=main_data.get("feels_like"),
            humidity=float(main_data.get("humidity", 0.0)),
            wind_speed=float(wind_data.get("speed", 0.0)),
            cloudiness=float(clouds_data.get("all", 0.0)),
            precipitation=float(precipitation),
            condition_main=weather.get("main", "Unknown"),
            condition_description=weather.get("description", ""),
            location=location,
            country=country,
        )

    def _handle_error_response(self, response: requests.Response) -> None:
        """Raise the provider error matching an OpenWeather error response."""
        try:
            error_data = response.json()
            message = error_data.get("message", "Unknown error")
            logging.error(f"OpenWeather API error response: {error_data}")
        except ValueError:
            logging.error(f"Non-JSON error response: HTTP {response.status_code}, body: {response.text[:500]}")
            message = response.text[:200] or "Unknown error"

        status = response.status_code
        if status == 401:
            raise AuthFailed(f"Invalid API key for weather service ({message})")
        if status == 404:
            raise LocationNotFound(f"Location not found ({message})")
        if status == 429:
            raise RateLimited("Weather API rate limit exceeded. Please try again later")
        raise ProviderUnavailable(f"Weather API error {status}: {message}")
