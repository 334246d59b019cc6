"""Pre-built simulation scenarios for testing and demonstration.

Scenarios provide complete pond configurations that can be quickly loaded
and run. All of them use synthetic weather so they need no input files.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from typing import TYPE_CHECKING

from pondsim.core.config import PondConfig, SimulationConfig, WeatherConfig
from pondsim.simulation.engine import run_from_config

if TYPE_CHECKING:
    from pondsim.core.state import SimulationResult


def create_spirulina_summer_scenario(total_days: int = 14) -> SimulationConfig:
    """Spirulina raceway in a hot, dry summer without harvesting.

    The culture grows from inoculation density until light limitation
    slows it down.

    Args:
        total_days: Number of days to simulate.

    Returns:
        Scenario configuration.
    """
    return SimulationConfig(
        name="Spirulina Summer Growth",
        total_days=total_days,
        pond=PondConfig(),
        weather=WeatherConfig(
            latitude=33.45,
            longitude=-112.07,
            start_date=date(2024, 6, 15),
            days=total_days,
            temp_mean=30.0,
            temp_amplitude_daily=8.0,
            dew_point_depression=18.0,
            cloud_cover=5.0,
        ),
    )


def create_semi_continuous_scenario(total_days: int = 21) -> SimulationConfig:
    """Nightly harvest of everything above 1.0 g/L.

    Args:
        total_days: Number of days to simulate.

    Returns:
        Scenario configuration.
    """
    return SimulationConfig(
        name="Semi-Continuous Harvest",
        total_days=total_days,
        pond=PondConfig(
            initial_density=0.5,
            harvest_mode="semi-continuous",
            harvest_threshold=1.0,
        ),
        weather=WeatherConfig(
            latitude=32.72,
            longitude=-117.16,
            start_date=date(2024, 7, 1),
            days=total_days,
            temp_mean=26.0,
            temp_amplitude_daily=6.0,
            dew_point_depression=8.0,
            cloud_cover=15.0,
            rain_hour=None,
        ),
    )


def create_batch_scenario(total_days: int = 21) -> SimulationConfig:
    """Batch harvest back to inoculum density when 1.2 g/L is reached.

    Args:
        total_days: Number of days to simulate.

    Returns:
        Scenario configuration.
    """
    return SimulationConfig(
        name="Batch Harvest",
        total_days=total_days,
        pond=PondConfig(
            harvest_mode="batch",
            harvest_threshold=1.2,
            harvest_target=0.3,
        ),
        weather=WeatherConfig(
            latitude=27.95,
            longitude=-82.46,
            start_date=date(2024, 5, 1),
            days=total_days,
            temp_mean=27.0,
            temp_amplitude_daily=5.0,
            dew_point_depression=6.0,
            cloud_cover=40.0,
            rain_hour=16,
            rain_mm=4.0,
        ),
    )


def create_winter_scenario(total_days: int = 14) -> SimulationConfig:
    """Cool season operation, starting from air temperature.

    Growth is temperature limited and the culture may decline.

    Args:
        total_days: Number of days to simulate.

    Returns:
        Scenario configuration.
    """
    return SimulationConfig(
        name="Winter Operation",
        total_days=total_days,
        pond=PondConfig(initial_temperature=None, initial_density=0.5),
        weather=WeatherConfig(
            latitude=33.45,
            longitude=-112.07,
            start_date=date(2024, 1, 10),
            days=total_days,
            temp_mean=13.0,
            temp_amplitude_daily=7.0,
            dew_point_depression=9.0,
            solar_max=900.0,
            cloud_cover=25.0,
            wind_mean=2.5,
        ),
    )


#: Built-in scenarios: name -> (factory, description)
SCENARIOS: dict[str, tuple[Callable[[int], SimulationConfig], str]] = {
    "spirulina-summer": (
        create_spirulina_summer_scenario,
        "Hot summer growth, no harvest",
    ),
    "semi-continuous": (
        create_semi_continuous_scenario,
        "Nightly harvest above 1.0 g/L",
    ),
    "batch": (
        create_batch_scenario,
        "Harvest to 0.3 g/L once 1.2 g/L is reached",
    ),
    "winter": (
        create_winter_scenario,
        "Cool season, temperature-limited growth",
    ),
}


def list_scenarios() -> list[tuple[str, str]]:
    """Names and descriptions of the built-in scenarios."""
    return [(name, description) for name, (_, description) in SCENARIOS.items()]


def get_scenario(name: str, total_days: int | None = None) -> SimulationConfig:
    """Look up a built-in scenario configuration.

    Args:
        name: Scenario name.
        total_days: Override the scenario's default duration.

    Returns:
        Scenario configuration.

    Raises:
        KeyError: If the scenario doesn't exist.
    """
    if name not in SCENARIOS:
        msg = f"Unknown scenario '{name}'. Available: {', '.join(SCENARIOS)}"
        raise KeyError(msg)
    factory, _ = SCENARIOS[name]
    if total_days is None:
        return factory()
    return factory(total_days)


def run_scenario(name: str, total_days: int | None = None) -> SimulationResult:
    """Run a built-in scenario.

    Args:
        name: Scenario name.
        total_days: Override the scenario's default duration.

    Returns:
        SimulationResult for the scenario.
    """
    return run_from_config(get_scenario(name, total_days))
