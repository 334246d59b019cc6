"""Physics module for open-pond calculations.

This module provides the physical models behind the pond simulation:
- Racetrack geometry
- Surface optics and Beer-Lambert light attenuation
- Surface energy balance (radiation, evaporation, convection, conduction)
- Growth kinetics (light and temperature limitation)
- Solar position (ASHRAE Chapter 14)

All functions use SI units unless otherwise noted.
"""

from pondsim.physics.constants import (
    C_P_WATER,
    DENSITY_WATER,
    PAR_COMBINED,
    STEFAN_BOLTZMANN,
)
from pondsim.physics.geometry import compute_geometry
from pondsim.physics.heat_balance import (
    HeatBalanceResult,
    compute_heat_balance,
    q_evaporation,
    q_longwave_in,
    q_longwave_out,
    q_solar,
    saturation_vapor_pressure,
    wind_speed_2m,
)
from pondsim.physics.kinetics import (
    LightResponse,
    TemperatureResponse,
    gaussian_temperature_factor,
    get_light_response,
    get_temperature_response,
    multiplicative_growth_rate,
    steele_light_factor,
)
from pondsim.physics.optics import (
    PARResult,
    beer_lambert_avg,
    compute_par,
    effective_depth,
    fresnel_transmission,
    lighted_depth_fraction,
)
from pondsim.physics.solar import solar_position, split_global_radiation

__all__ = [
    # Constants
    "C_P_WATER",
    "DENSITY_WATER",
    "PAR_COMBINED",
    "STEFAN_BOLTZMANN",
    # Geometry
    "compute_geometry",
    # Optics
    "PARResult",
    "beer_lambert_avg",
    "compute_par",
    "effective_depth",
    "fresnel_transmission",
    "lighted_depth_fraction",
    # Heat balance
    "HeatBalanceResult",
    "compute_heat_balance",
    "q_evaporation",
    "q_longwave_in",
    "q_longwave_out",
    "q_solar",
    "saturation_vapor_pressure",
    "wind_speed_2m",
    # Kinetics
    "LightResponse",
    "TemperatureResponse",
    "gaussian_temperature_factor",
    "get_light_response",
    "get_temperature_response",
    "multiplicative_growth_rate",
    "steele_light_factor",
    # Solar
    "solar_position",
    "split_global_radiation",
]
