"""Tests for event analysis, status reporting and alternative-date search."""
import threading
import time
import pytest
from datetime import date, datetime, timedelta, timezone
from unittest.mock import Mock
from event import Event
from event_planner import analyze_event, find_alternatives, weather_status
from suitability import Rating
from weather_data import DailyWeatherRecord, InvalidWeatherRecord, RawTimeslot
from weather_provider import ProviderUnavailable, RateLimited, WeatherProviderBase
from weather_cache import WeatherCache
from weather_service import ForecastNotAvailable, WeatherService
from date_resolver import UnsupportedDateRange

EVENT_DATE = date(2024, 6, 1)


def make_record(day, temperature=22, probability=0, wind=8, condition="Clear"):
    return DailyWeatherRecord(
        location="Testville",
        date=day,
        temperature=temperature,
        min_temperature=temperature - 3,
        max_temperature=temperature + 3,
        humidity=50,
        wind_speed=wind,
        precipitation_probability=probability,
        precipitation=0.0,
        condition_main=condition,
        condition_description=condition.lower(),
        retrieved_at=datetime(2024, 6, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def event():
    return Event(name="Company Picnic", location="Testville", date=EVENT_DATE, event_type="general", id="evt-1")


def service_with(records_by_day, errors_by_day=None):
    """Mock WeatherService answering from a dict of date -> record (or exception)."""
    errors_by_day = errors_by_day or {}

    def lookup(location, requested):
        if requested in errors_by_day:
            raise errors_by_day[requested]
        if requested not in records_by_day:
            raise UnsupportedDateRange(f"{requested} out of range")
        return records_by_day[requested]

    service = Mock()
    service.get_weather_for_date.side_effect = lookup
    return service


def day(n):
    return date(2024, 6, n)


def test_analyze_event(event):
    service = service_with({EVENT_DATE: make_record(EVENT_DATE)})

    analysis = analyze_event(event, service)

    assert analysis.score == 110
    assert analysis.event_id == "evt-1"
    service.get_weather_for_date.assert_called_once_with("Testville", EVENT_DATE)


def test_analyze_event_propagates_provider_error(event):
    service = service_with({}, {EVENT_DATE: RateLimited("slow down")})

    with pytest.raises(RateLimited):
        analyze_event(event, service)


def test_weather_status_success(event):
    service = service_with({EVENT_DATE: make_record(EVENT_DATE, temperature=5, probability=30)})

    status = weather_status(event, service)

    assert status.rating is Rating.GOOD
    assert status.score == 75
    assert status.temperature == 5
    assert status.conditions == "clear"
    assert status.error is None


@pytest.mark.parametrize("error", [
    ProviderUnavailable("down"),
    UnsupportedDateRange("too far"),
    ForecastNotAvailable("missing"),
])
def test_weather_status_unknown_on_failure(event, error):
    service = service_with({}, {EVENT_DATE: error})

    status = weather_status(event, service)

    assert status.rating is Rating.UNKNOWN
    assert status.score is None
    assert status.error == "Weather data unavailable"


def test_alternatives_sorted_by_score(event):
    service = service_with({
        day(2): make_record(day(2), probability=60),            # 30+0+25+25 = 80
        day(3): make_record(day(3)),                            # 110
        day(4): make_record(day(4), temperature=5),             # 10+30+25+25 = 90
        day(5): make_record(day(5), condition="Rain"),          # 85
    })

    alternatives = find_alternatives(event, service, window_days=4)

    assert [a.date for a in alternatives] == [day(3), day(4), day(5), day(2)]
    assert [a.score for a in alternatives] == [110, 90, 85, 80]
    assert alternatives[0].day_of_week == "Monday"
    assert alternatives[0].rating is Rating.EXCELLENT
    assert alternatives[0].weather.conditions == "clear"


def test_alternatives_ties_keep_date_order(event):
    records = {day(n): make_record(day(n)) for n in range(2, 7)}
    service = service_with(records)

    alternatives = find_alternatives(event, service, window_days=5, max_workers=5)

    assert [a.date for a in alternatives] == [day(2), day(3), day(4), day(5), day(6)]


def test_alternatives_skip_failed_dates(event):
    service = service_with(
        {day(2): make_record(day(2)), day(4): make_record(day(4), wind=25)},
        {day(3): ProviderUnavailable("timeout")},
    )

    alternatives = find_alternatives(event, service, window_days=7)

    # day 3 failed, days 5-8 are out of range
    assert [a.date for a in alternatives] == [day(2), day(4)]
    assert service.get_weather_for_date.call_count == 7


def test_alternatives_all_failed_returns_empty(event):
    service = service_with({})

    assert find_alternatives(event, service, window_days=3) == []


def test_alternatives_unique_dates_and_bounded_length(event):
    records = {day(n): make_record(day(n), temperature=10 + n) for n in range(2, 9)}
    service = service_with(records)

    alternatives = find_alternatives(event, service, window_days=7)

    dates = [a.date for a in alternatives]
    assert len(alternatives) <= 7
    assert len(set(dates)) == len(dates)
    scores = [a.score for a in alternatives]
    assert scores == sorted(scores, reverse=True)


def test_alternatives_empty_window(event):
    service = service_with({})

    assert find_alternatives(event, service, window_days=0) == []
    service.get_weather_for_date.assert_not_called()


def test_alternatives_bounded_concurrency(event):
    lock = threading.Lock()
    active = [0]
    peak = [0]
    release = threading.Event()

    def lookup(location, requested):
        with lock:
            active[0] += 1
            peak[0] = max(peak[0], active[0])
            if active[0] >= 2:
                release.set()
        release.wait(timeout=1.0)
        with lock:
            active[0] -= 1
        return make_record(requested)

    service = Mock()
    service.get_weather_for_date.side_effect = lookup

    alternatives = find_alternatives(event, service, window_days=6, max_workers=2)

    assert len(alternatives) == 6
    assert peak[0] <= 2


def test_unexpected_errors_are_not_swallowed(event):
    service = service_with({}, {day(2): RuntimeError("bug")})

    with pytest.raises(RuntimeError):
        find_alternatives(event, service, window_days=1)


def make_slot(day_offset, hour, humidity=50.0):
    moment = datetime(2024, 6, 1, tzinfo=timezone.utc) + timedelta(days=day_offset, hours=hour)
    return RawTimeslot(
        timestamp=int(moment.timestamp()),
        timezone_offset=0,
        temp=20.0,
        humidity=humidity,
        wind_speed=2.0,
        condition_main="Clear",
        condition_description="clear sky",
        location="Testville",
    )


class SlowForecastProvider(WeatherProviderBase):
    """Provider whose forecast call takes a while, counting calls across threads."""

    def __init__(self, slots, delay=0.2):
        self.slots = slots
        self.delay = delay
        self.forecast_calls = 0
        self._lock = threading.Lock()

    def fetch_current(self, location):
        return self.slots[0]

    def fetch_forecast_window(self, location, days):
        with self._lock:
            self.forecast_calls += 1
        time.sleep(self.delay)
        return self.slots


def real_service(provider):
    return WeatherService(provider, cache=WeatherCache(ttl_seconds=60), today=lambda: EVENT_DATE)


def test_alternatives_fetch_forecast_once_with_empty_cache(event):
    # Forecast covers June 2nd to 4th; June 5th and 6th are missing from it
    provider = SlowForecastProvider([make_slot(d, h) for d in (1, 2, 3) for h in (0, 6, 12, 18)])
    service = real_service(provider)

    alternatives = find_alternatives(event, service, window_days=5, max_workers=5)

    assert provider.forecast_calls == 1
    assert [a.date for a in alternatives] == [day(2), day(3), day(4)]


def test_alternatives_skip_dates_with_invalid_provider_data(event):
    provider = SlowForecastProvider([make_slot(d, 12, humidity=130.0) for d in (1, 2, 3)], delay=0)
    service = real_service(provider)

    assert find_alternatives(event, service, window_days=3) == []
    assert service.cache_stats()["keys"] == 0


def test_weather_status_unknown_on_invalid_record(event):
    service = service_with({}, {EVENT_DATE: InvalidWeatherRecord("humidity must be within 0-100, got 130")})

    status = weather_status(event, service)

    assert status.rating is Rating.UNKNOWN
    assert status.error == "Weather data unavailable"


def test_analyze_event_stores_analysis_on_event(event):
    service = service_with({EVENT_DATE: make_record(EVENT_DATE)})

    analysis = analyze_event(event, service)

    assert event.weather_analysis is analysis
    assert event.analysis_is_current()


def test_weather_status_reuses_stored_analysis(event):
    service = service_with({EVENT_DATE: make_record(EVENT_DATE, temperature=5, probability=30)})
    analyze_event(event, service)

    status = weather_status(event, service)

    assert status.score == 75
    service.get_weather_for_date.assert_called_once_with("Testville", EVENT_DATE)


def test_weather_status_reanalyzes_after_date_change(event):
    service = service_with({
        EVENT_DATE: make_record(EVENT_DATE),
        day(2): make_record(day(2), temperature=5, probability=30),
    })
    analyze_event(event, service)

    event.update(date=day(2))
    status = weather_status(event, service)

    assert status.score == 75
    assert event.weather_analysis.event_date == day(2)
    assert service.get_weather_for_date.call_count == 2
