"""Tests for event type requirement profiles."""
import pytest
from dataclasses import FrozenInstanceError
from event_requirements import REQUIREMENTS, EventType, requirements_for
from weather_data import WeatherCondition


def test_every_event_type_has_a_profile():
    assert set(REQUIREMENTS) == set(EventType)


@pytest.mark.parametrize("raw,expected", [
    ("wedding", EventType.WEDDING),
    ("HIKING", EventType.HIKING),
    (" corporate_outdoor ", EventType.CORPORATE_OUTDOOR),
    (EventType.OUTDOOR_SPORTS, EventType.OUTDOOR_SPORTS),
    ("birthday_party", EventType.GENERAL),
    ("", EventType.GENERAL),
    (None, EventType.GENERAL),
])
def test_parse_event_type(raw, expected):
    assert EventType.parse(raw) is expected


def test_unknown_type_falls_back_to_general():
    assert requirements_for("rooftop_concert") is REQUIREMENTS[EventType.GENERAL]


def test_wedding_profile():
    req = requirements_for("wedding")

    assert req.name == "Wedding/Formal Event"
    assert (req.min_temp, req.max_temp) == (18, 28)
    assert req.max_precipitation == 10
    assert req.max_wind_speed == 15
    assert req.preferred_conditions == (WeatherCondition.CLEAR, WeatherCondition.CLOUDS)


def test_hiking_prefers_mist():
    assert WeatherCondition.MIST in requirements_for("hiking").preferred_conditions
    assert WeatherCondition.MIST not in requirements_for("general").preferred_conditions


def test_profiles_are_immutable():
    with pytest.raises(FrozenInstanceError):
        requirements_for("general").max_temp = 40
