"""Shared pytest fixtures for pondsim tests."""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Any

import pytest

from pondsim.core.config import PondConfig
from pondsim.simulation.weather import HourlyWeather, WeatherDay

# =============================================================================
# Weather builders
# =============================================================================


def make_hour(hour: int, **overrides: Any) -> HourlyWeather:
    """Build a mild, calm, dark observation with selected overrides."""
    values: dict[str, Any] = {
        "hour": hour,
        "temperature": 25.0,
        "relative_humidity": 50.0,
        "dew_point": 13.9,
        "cloud_cover": 0.0,
        "wind_speed": 2.0,
        "wind_direction": 180.0,
        "precipitation": 0.0,
        "direct_radiation": 0.0,
        "diffuse_radiation": 0.0,
        "shortwave_radiation": 0.0,
        "soil_temperature": 22.0,
        "solar_elevation": -30.0,
        "solar_azimuth": 0.0,
    }
    values.update(overrides)
    return HourlyWeather(**values)


def make_sunny_day(date: str = "2024-06-15", peak_direct: float = 700.0) -> WeatherDay:
    """Build a day with a symmetric sun path between 06:00 and 18:00."""
    hours = []
    for h in range(24):
        shape = math.sin(math.pi * (h - 6) / 12) if 6 < h < 18 else 0.0
        elevation = 70.0 * shape if shape > 0 else -20.0
        direct = peak_direct * shape
        diffuse = 120.0 * shape
        hours.append(
            make_hour(
                h,
                temperature=24.0 + 6.0 * math.cos(2 * math.pi * (h - 15) / 24),
                direct_radiation=direct,
                diffuse_radiation=diffuse,
                shortwave_radiation=direct + diffuse,
                solar_elevation=elevation,
                solar_azimuth=90.0 + 15.0 * (h - 6),
            )
        )
    return WeatherDay(date=date, hours=tuple(hours))


def make_dark_day(date: str = "2024-12-21", **overrides: Any) -> WeatherDay:
    """Build a day without any sunlight."""
    return WeatherDay(
        date=date, hours=tuple(make_hour(h, **overrides) for h in range(24))
    )


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def weather_hour() -> Callable[..., HourlyWeather]:
    """Factory for single observations: weather_hour(hour, **overrides)."""
    return make_hour


@pytest.fixture
def dark_day_factory() -> Callable[..., WeatherDay]:
    """Factory for sunless days: dark_day_factory(date, **overrides)."""
    return make_dark_day


@pytest.fixture
def sunny_day_factory() -> Callable[..., WeatherDay]:
    """Factory for clear days: sunny_day_factory(date, peak_direct)."""
    return make_sunny_day


@pytest.fixture
def sunny_day() -> WeatherDay:
    """One clear summer day."""
    return make_sunny_day()


@pytest.fixture
def sunny_days() -> list[WeatherDay]:
    """Three identical clear days."""
    return [make_sunny_day(f"2024-06-{d}") for d in (15, 16, 17)]


@pytest.fixture
def dark_day() -> WeatherDay:
    """One day without sunlight."""
    return make_dark_day()


@pytest.fixture
def default_pond() -> PondConfig:
    """Default Spirulina raceway configuration."""
    return PondConfig()
