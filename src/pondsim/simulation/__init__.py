"""Simulation engine, weather and results modules."""

from pondsim.simulation.engine import (
    PondSimulationEngine,
    SimulationStats,
    SimulationStatus,
    run_from_config,
    run_simulation,
)
from pondsim.simulation.results import (
    result_to_dict,
    summarize_timesteps,
    timestep_arrays,
    timesteps_to_csv,
    write_json,
)
from pondsim.simulation.scenarios import (
    create_batch_scenario,
    create_semi_continuous_scenario,
    create_spirulina_summer_scenario,
    create_winter_scenario,
    get_scenario,
    list_scenarios,
    run_scenario,
)
from pondsim.simulation.weather import (
    HourlyWeather,
    SyntheticWeatherConfig,
    WeatherDay,
    average_days,
    generate_synthetic_days,
    load_weather_csv,
    load_weather_days,
    parse_open_meteo,
    weather_from_config,
)

__all__ = [
    # Engine
    "PondSimulationEngine",
    "SimulationStats",
    "SimulationStatus",
    "run_from_config",
    "run_simulation",
    # Results
    "result_to_dict",
    "summarize_timesteps",
    "timestep_arrays",
    "timesteps_to_csv",
    "write_json",
    # Weather
    "HourlyWeather",
    "SyntheticWeatherConfig",
    "WeatherDay",
    "average_days",
    "generate_synthetic_days",
    "load_weather_csv",
    "load_weather_days",
    "parse_open_meteo",
    "weather_from_config",
    # Scenarios
    "create_batch_scenario",
    "create_semi_continuous_scenario",
    "create_spirulina_summer_scenario",
    "create_winter_scenario",
    "get_scenario",
    "list_scenarios",
    "run_scenario",
]
