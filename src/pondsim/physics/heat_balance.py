"""Surface energy balance of an open pond.

This module computes each heat exchange term at the pond surface and the
resulting temperature change:
- Solar gain with Fresnel reflectance
- Atmospheric longwave in (Brutsaert, cloud corrected)
- Longwave emission from the water surface
- Evaporation (Penman-type)
- Sensible convection linked to evaporation through the Bowen ratio
- Ground conduction through bottom and side walls
- Chemical energy stored by photosynthesis

Fluxes are in W/m² of pond surface; positive values of loss terms leave the
pond.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, NamedTuple

from pondsim.physics.constants import (
    BOWEN_CONSTANT,
    C_P_WATER,
    DENSITY_WATER,
    EMISSIVITY_WATER,
    EVAPORATION_COEFFICIENT,
    FALLBACK_DEPTH,
    GRAMS_PER_KILOGRAM,
    GROUND_CONDUCTION_DEPTH,
    HEAT_OF_COMBUSTION_BIOMASS,
    HOURS_PER_DAY,
    MCADAMS_CALM,
    MCADAMS_FALLBACK_WIND,
    MCADAMS_WIND,
    MIN_VAPOR_PRESSURE_DEFICIT,
    MJ_PER_DAY_PER_WATT,
    SECONDS_PER_HOUR,
    STANDARD_PRESSURE,
    STEFAN_BOLTZMANN,
    THERMAL_CONDUCTIVITY_SOIL,
    WATTS_PER_MJ_PER_HOUR,
    WIND_10M_TO_2M,
    WIND_FUNCTION_CALM,
    WIND_FUNCTION_SLOPE,
    celsius_to_kelvin,
)
from pondsim.physics.optics import diffuse_transmission, fresnel_transmission

if TYPE_CHECKING:
    from pondsim.core.state import PondGeometry
    from pondsim.simulation.weather import HourlyWeather


class EvaporationFlux(NamedTuple):
    """Evaporative heat loss in two unit systems.

    Attributes:
        w_m2: Heat flux in W/m² (used in the energy balance).
        mj_m2_day: Heat flux in MJ/(m²·day).
    """

    w_m2: float
    mj_m2_day: float


class HeatBalanceResult(NamedTuple):
    """All heat balance terms for one hour.

    Attributes:
        q_solar: Absorbed solar radiation in W/m².
        q_longwave_in: Atmospheric longwave radiation in W/m².
        q_longwave_out: Longwave emission from the pond in W/m².
        q_evap: Evaporative loss in W/m².
        q_convection: Sensible convective loss in W/m².
        q_conduction: Ground conduction loss in W/m².
        q_biomass: Photosynthetic storage in W/m².
        q_net: Net heat gain in W/m².
        delta_t: Temperature change over the hour in °C.
        u2: Wind speed at 2 m in m/s.
    """

    q_solar: float
    q_longwave_in: float
    q_longwave_out: float
    q_evap: float
    q_convection: float
    q_conduction: float
    q_biomass: float
    q_net: float
    delta_t: float
    u2: float


# =============================================================================
# Atmosphere
# =============================================================================


def wind_speed_2m(u10: float) -> float:
    """Convert 10 m wind speed to 2 m with a logarithmic profile.

    u2 ≈ 0.825·u10 over open water (z0 = 0.001 m).

    Args:
        u10: Wind speed at 10 m in m/s.

    Returns:
        Wind speed at 2 m in m/s.
    """
    return u10 * WIND_10M_TO_2M


def saturation_vapor_pressure(t: float) -> float:
    """Saturation vapour pressure (Magnus-Tetens form).

    Args:
        t: Temperature in °C.

    Returns:
        Saturation vapour pressure in kPa.

    Examples:
        >>> round(saturation_vapor_pressure(20.0), 3)
        2.338
    """
    return 0.6108 * math.exp(17.27 * t / (t + 237.3))


def vapor_pressure(t_dew: float) -> float:
    """Actual vapour pressure from the dew point in kPa."""
    return saturation_vapor_pressure(t_dew)


# =============================================================================
# Radiation
# =============================================================================


def q_solar(
    direct_radiation: float,
    diffuse_radiation: float,
    solar_elevation: float,
) -> float:
    """Solar radiation absorbed by the pond.

    Uses Fresnel transmission instead of a constant albedo: the direct beam
    by its incidence angle, diffuse light at the fixed equivalent angle.

    Args:
        direct_radiation: Direct beam on the horizontal in W/m².
        diffuse_radiation: Diffuse horizontal radiation in W/m².
        solar_elevation: Solar elevation in degrees.

    Returns:
        Absorbed solar flux in W/m².
    """
    theta_i = max(0.0, 90.0 - solar_elevation)
    t_direct = fresnel_transmission(theta_i) if solar_elevation > 0 else 0.0
    return direct_radiation * t_direct + diffuse_radiation * diffuse_transmission()


def q_longwave_in(t_air: float, t_dew: float, cloud_fraction: float) -> float:
    """Atmospheric longwave radiation reaching the pond.

    Brutsaert (1975) clear-sky emissivity with e_a in kPa:
    ε = 1.24·10^(1/7)·(e_a/T)^(1/7) = 1.768·(e_a/T)^(1/7),
    increased by (1 + 0.2·C²) for cloud fraction C.

    Args:
        t_air: Air temperature in °C.
        t_dew: Dew point in °C.
        cloud_fraction: Cloud cover fraction (0-1).

    Returns:
        Incoming longwave flux in W/m².
    """
    t_air_k = celsius_to_kelvin(t_air)
    e_a = vapor_pressure(t_dew)
    eps_atm = 1.768 * (e_a / t_air_k) ** (1.0 / 7.0)

    c = max(0.0, min(1.0, cloud_fraction))
    return eps_atm * STEFAN_BOLTZMANN * t_air_k**4 * (1.0 + 0.2 * c * c)


def q_longwave_out(t_pond: float) -> float:
    """Longwave emission from the pond surface in W/m².

    Q = ε_w·σ·T⁴
    """
    return EMISSIVITY_WATER * STEFAN_BOLTZMANN * celsius_to_kelvin(t_pond) ** 4


# =============================================================================
# Turbulent Fluxes
# =============================================================================


def q_evaporation(t_pond: float, e_a: float, u2: float) -> EvaporationFlux:
    """Evaporative heat loss (Penman-type).

    Q = h·max(0, e_s(T_pond) - e_a)·(a + b·u2)

    Args:
        t_pond: Pond temperature in °C.
        e_a: Actual vapour pressure of the air in kPa.
        u2: Wind speed at 2 m in m/s.

    Returns:
        EvaporationFlux in W/m² and MJ/(m²·day).
    """
    vpd = max(0.0, saturation_vapor_pressure(t_pond) - e_a)
    f_wind = WIND_FUNCTION_CALM + WIND_FUNCTION_SLOPE * u2
    mj_m2_day = EVAPORATION_COEFFICIENT * vpd * f_wind
    return EvaporationFlux(w_m2=mj_m2_day / MJ_PER_DAY_PER_WATT, mj_m2_day=mj_m2_day)


def q_convection_bowen(
    t_pond: float,
    t_air: float,
    e_s_pond: float,
    e_a: float,
    q_evap: float,
) -> float:
    """Sensible heat loss from the Bowen ratio.

    β = γ·P·(T_pond - T_air) / (P·(e_s - e_a)), Q_conv = β·Q_evap

    Falls back to a McAdams coefficient at fixed wind when the vapour
    pressure deficit is too small to divide by.

    Args:
        t_pond: Pond temperature in °C.
        t_air: Air temperature in °C.
        e_s_pond: Saturation vapour pressure at pond temperature in kPa.
        e_a: Actual vapour pressure in kPa.
        q_evap: Evaporative loss in W/m².

    Returns:
        Convective loss in W/m².
    """
    vpd = e_s_pond - e_a
    if abs(vpd) < MIN_VAPOR_PRESSURE_DEFICIT:
        h = MCADAMS_CALM + MCADAMS_WIND * MCADAMS_FALLBACK_WIND
        return h * (t_pond - t_air)

    vpd_pa = vpd * 1000.0  # Bowen constant is in Pa/°C
    bowen_ratio = (
        BOWEN_CONSTANT * STANDARD_PRESSURE * (t_pond - t_air)
    ) / (STANDARD_PRESSURE * vpd_pa)
    return bowen_ratio * q_evap


# =============================================================================
# Conduction and Storage
# =============================================================================


def q_conduction(
    t_pond: float,
    t_ground: float,
    surface_area: float,
    perimeter: float,
    depth: float,
) -> float:
    """Ground conduction loss with side-wall correction.

    Q = k·(T_pond - T_ground)/d × (A_surface + P·depth)/A_surface

    Args:
        t_pond: Pond temperature in °C.
        t_ground: Soil temperature in °C.
        surface_area: Pond surface area in m².
        perimeter: Pond perimeter in m.
        depth: Culture depth in m.

    Returns:
        Conductive loss per unit surface in W/m².
    """
    q_bottom = THERMAL_CONDUCTIVITY_SOIL * (t_pond - t_ground) / GROUND_CONDUCTION_DEPTH
    wetted_area = surface_area + perimeter * depth
    return q_bottom * (wetted_area / surface_area)


def q_biomass(biomass: float, mu_eff: float, depth: float) -> float:
    """Energy stored as biomass by photosynthesis.

    H_c (MJ/kg) × X (kg/m³ ÷ 1000) × µ_eff/24 (1/h) × depth (m) gives
    MJ/(m²·h), converted to W/m². Typically 1-5 W/m².

    Args:
        biomass: Biomass concentration in g/L.
        mu_eff: Effective growth rate in 1/day.
        depth: Culture depth in m.

    Returns:
        Heat sink in W/m² (0 when growth is not positive).
    """
    if mu_eff <= 0:
        return 0.0
    mj_per_m2_h = (
        HEAT_OF_COMBUSTION_BIOMASS
        * (biomass / GRAMS_PER_KILOGRAM)
        * (mu_eff / HOURS_PER_DAY)
        * depth
    )
    return mj_per_m2_h * WATTS_PER_MJ_PER_HOUR


# =============================================================================
# Combined Heat Balance
# =============================================================================


def compute_heat_balance(
    weather: HourlyWeather,
    t_pond: float,
    biomass: float,
    mu_eff: float,
    geometry: PondGeometry,
    volume: float | None = None,
) -> HeatBalanceResult:
    """Compute every heat term, the net flux and the hourly temperature step.

    Q_net = Q_solar + Q_lw_in - Q_evap - Q_conv - Q_cond - Q_lw_out - Q_bio
    ΔT = Q_net / (ρ·c_p·depth) × 3600

    The depth is recovered from volume / surface area so that it follows
    the current culture volume.

    Args:
        weather: Hourly weather observation.
        t_pond: Pond temperature in °C.
        biomass: Biomass concentration in g/L.
        mu_eff: Effective growth rate in 1/day.
        geometry: Pond geometry.
        volume: Current culture volume in m³ (defaults to nominal).

    Returns:
        HeatBalanceResult for the hour.
    """
    if volume is None:
        volume = geometry.volume_m3
    depth = (
        volume / geometry.surface_area if geometry.surface_area > 0 else FALLBACK_DEPTH
    )

    u2 = wind_speed_2m(weather.wind_speed)
    e_a = vapor_pressure(weather.dew_point)
    e_s_pond = saturation_vapor_pressure(t_pond)
    cloud_fraction = weather.cloud_cover / 100.0

    solar = q_solar(
        weather.direct_radiation, weather.diffuse_radiation, weather.solar_elevation
    )
    lw_in = q_longwave_in(weather.temperature, weather.dew_point, cloud_fraction)
    lw_out = q_longwave_out(t_pond)
    evap = q_evaporation(t_pond, e_a, u2).w_m2
    conv = q_convection_bowen(t_pond, weather.temperature, e_s_pond, e_a, evap)
    cond = q_conduction(
        t_pond,
        weather.soil_temperature,
        geometry.surface_area,
        geometry.perimeter,
        depth,
    )
    bio = q_biomass(biomass, mu_eff, depth)

    q_net = solar + lw_in - evap - conv - cond - lw_out - bio

    # W/m² is J/s per m²; × 3600 gives the change over one hour
    delta_t = q_net / (DENSITY_WATER * C_P_WATER * depth) * SECONDS_PER_HOUR

    return HeatBalanceResult(
        q_solar=solar,
        q_longwave_in=lw_in,
        q_longwave_out=lw_out,
        q_evap=evap,
        q_convection=conv,
        q_conduction=cond,
        q_biomass=bio,
        q_net=q_net,
        delta_t=delta_t,
        u2=u2,
    )
