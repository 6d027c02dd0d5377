"""Tests for weather_data module."""
import pytest
from dataclasses import FrozenInstanceError
from datetime import date, datetime, timezone
from weather_data import DailyWeatherRecord, InvalidWeatherRecord, RawTimeslot, WeatherCondition


def make_record(**overrides):
    fields = dict(
        location="Testville",
        date=date(2024, 6, 1),
        temperature=20,
        min_temperature=15,
        max_temperature=24,
        humidity=60,
        wind_speed=8,
        precipitation_probability=0,
        precipitation=0.0,
        condition_main="Clear",
        condition_description="clear sky",
        retrieved_at=datetime.now(timezone.utc),
    )
    fields.update(overrides)
    return DailyWeatherRecord(**fields)


def test_daily_record_creation():
    """Test creating a record with required fields."""
    record = make_record()

    assert record.location == "Testville"
    assert record.date == date(2024, 6, 1)
    assert record.temperature == 20
    assert record.condition is WeatherCondition.CLEAR


def test_daily_record_is_immutable():
    record = make_record()
    with pytest.raises(FrozenInstanceError):
        record.temperature = 30


@pytest.mark.parametrize("field,value", [
    ("humidity", 101),
    ("humidity", -1),
    ("precipitation_probability", 120),
    ("temperature", float("nan")),
    ("max_temperature", float("inf")),
    ("wind_speed", -3),
    ("temperature", None),
    ("condition_main", ""),
])
def test_daily_record_rejects_invalid_values(field, value):
    with pytest.raises(InvalidWeatherRecord):
        make_record(**{field: value})


def test_daily_record_accepts_boundaries():
    record = make_record(humidity=100, precipitation_probability=0)
    assert record.humidity == 100


def test_weather_condition_from_label():
    assert WeatherCondition.from_label("Clouds") is WeatherCondition.CLOUDS
    assert WeatherCondition.from_label("fog") is WeatherCondition.FOG
    assert WeatherCondition.from_label("Haze") is WeatherCondition.OTHER
    assert WeatherCondition.from_label("") is WeatherCondition.OTHER


def test_timeslot_local_date_uses_offset():
    # 2024-06-01 23:00 UTC is already June 2nd two hours east of UTC
    slot = RawTimeslot(
        timestamp=int(datetime(2024, 6, 1, 23, 0, tzinfo=timezone.utc).timestamp()),
        timezone_offset=7200,
        temp=18.0,
        humidity=70.0,
        wind_speed=2.0,
        condition_main="Clouds",
        condition_description="few clouds",
    )
    assert slot.local_date() == date(2024, 6, 2)

    utc_slot = RawTimeslot(
        timestamp=slot.timestamp,
        timezone_offset=0,
        temp=18.0,
        humidity=70.0,
        wind_speed=2.0,
        condition_main="Clouds",
        condition_description="few clouds",
    )
    assert utc_slot.local_date() == date(2024, 6, 1)
