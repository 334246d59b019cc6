"""Surface optics and light attenuation in the pond culture.

This module turns surface irradiance into the light available to the
culture:
- Fresnel transmission at the air-water interface
- Refraction and the resulting optical path length
- Beer-Lambert depth-averaged intensity
- Fraction of the depth that receives usable light

Direct and diffuse radiation follow separate optical chains. Diffuse light
arrives at one fixed equivalent angle whose transmission and path factor are
computed once at import.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, NamedTuple

from pondsim.physics.constants import (
    DIFFUSE_EQUIVALENT_ANGLE,
    FRESNEL_NORMAL_TRANSMISSION,
    G_PER_L_TO_G_PER_M3,
    MAX_PATH_LENGTH_FACTOR,
    MIN_USABLE_PAR,
    N_AIR,
    N_WATER,
    OPTICALLY_THIN_LIMIT,
    PAR_COMBINED,
)

if TYPE_CHECKING:
    from pondsim.simulation.weather import HourlyWeather


class PARResult(NamedTuple):
    """Light available to the culture for one hour.

    Attributes:
        par_direct_surface: Direct PAR below the interface in µmol/(m²·s).
        par_diffuse_surface: Diffuse PAR below the interface in µmol/(m²·s).
        par_avg_culture: Volume-averaged PAR (direct + diffuse) in µmol/(m²·s).
        fresnel_direct: Direct-beam transmission factor (0-1).
        f_lighted: Fraction of the depth receiving usable light (0-1).
    """

    par_direct_surface: float
    par_diffuse_surface: float
    par_avg_culture: float
    fresnel_direct: float
    f_lighted: float


# =============================================================================
# Interface
# =============================================================================


def fresnel_transmission(theta_deg: float) -> float:
    """Fresnel transmission of unpolarized light entering water from air.

    Averages the s- and p-polarized reflectances.

    Args:
        theta_deg: Angle of incidence from the surface normal in degrees.

    Returns:
        Transmitted fraction (0-1). Near-normal incidence returns the
        empirical 0.98; grazing incidence returns 0.

    Examples:
        >>> fresnel_transmission(0.0)
        0.98
        >>> fresnel_transmission(90.0)
        0.0
    """
    if theta_deg <= 0:
        return FRESNEL_NORMAL_TRANSMISSION
    if theta_deg >= 90:
        return 0.0

    theta_i = math.radians(theta_deg)
    sin_r = (N_AIR / N_WATER) * math.sin(theta_i)
    if sin_r >= 1:
        return 0.0

    cos_i = math.cos(theta_i)
    cos_r = math.cos(math.asin(sin_r))

    r_s = ((N_AIR * cos_i - N_WATER * cos_r) / (N_AIR * cos_i + N_WATER * cos_r)) ** 2
    r_p = ((N_AIR * cos_r - N_WATER * cos_i) / (N_AIR * cos_r + N_WATER * cos_i)) ** 2

    return 1.0 - (r_s + r_p) / 2.0


def refracted_angle(theta_deg: float) -> float:
    """Refracted angle below the surface via Snell's law.

    Args:
        theta_deg: Angle of incidence in degrees.

    Returns:
        Refraction angle from the normal in degrees.
    """
    if theta_deg <= 0:
        return 0.0
    if theta_deg >= 90:
        return 90.0
    sin_r = (N_AIR / N_WATER) * math.sin(math.radians(theta_deg))
    if sin_r >= 1:
        return 90.0
    return math.degrees(math.asin(sin_r))


def effective_depth(depth: float, theta_deg: float) -> float:
    """Optical path length through the culture after refraction.

    Args:
        depth: Physical culture depth in m.
        theta_deg: Angle of incidence in degrees.

    Returns:
        Path length in m, capped at 100× the depth.
    """
    if theta_deg <= 0:
        return depth
    cos_r = math.cos(math.radians(refracted_angle(theta_deg)))
    if cos_r > 0.01:
        return depth / cos_r
    return depth * MAX_PATH_LENGTH_FACTOR


# =============================================================================
# Attenuation
# =============================================================================


def extinction_coefficient(epsilon: float, biomass: float, kb: float) -> float:
    """Combined extinction coefficient K = ε·X + kb.

    Args:
        epsilon: Specific extinction coefficient in m²/g.
        biomass: Biomass concentration in g/L.
        kb: Background extinction in 1/m.

    Returns:
        Extinction coefficient in 1/m.
    """
    return epsilon * (biomass * G_PER_L_TO_G_PER_M3) + kb


def intensity_at_depth(i_surface: float, k: float, z: float) -> float:
    """Light intensity at depth z: I(z) = I₀·exp(-K·z)."""
    return i_surface * math.exp(-k * z)


def beer_lambert_avg(
    i_surface: float,
    epsilon: float,
    biomass: float,
    kb: float,
    path_length: float,
) -> float:
    """Average intensity along an absorbing path.

    I_avg = I₀ / (K·L) × (1 - exp(-K·L))

    Args:
        i_surface: PAR just below the surface in µmol/(m²·s).
        epsilon: Specific extinction coefficient in m²/g.
        biomass: Biomass concentration in g/L.
        kb: Background extinction in 1/m.
        path_length: Effective optical path in m.

    Returns:
        Path-averaged PAR in µmol/(m²·s).
    """
    if i_surface <= 0:
        return 0.0
    kl = extinction_coefficient(epsilon, biomass, kb) * path_length
    if kl < OPTICALLY_THIN_LIMIT:
        return i_surface
    return i_surface / kl * (1.0 - math.exp(-kl))


def lighted_depth_fraction(
    i_surface: float,
    epsilon: float,
    biomass: float,
    kb: float,
    depth: float,
) -> float:
    """Fraction of the culture depth that receives usable PAR.

    The lighted depth is where I(z) falls to the minimum usable PAR.

    Returns:
        Fraction clamped to [0, 1].
    """
    if i_surface <= MIN_USABLE_PAR:
        return 0.0
    k = extinction_coefficient(epsilon, biomass, kb)
    if k <= 0:
        return 1.0
    lighted = math.log(i_surface / MIN_USABLE_PAR) / k
    return min(lighted / depth, 1.0)


# Diffuse light uses one representative angle for every timestep
_T_DIFFUSE = fresnel_transmission(DIFFUSE_EQUIVALENT_ANGLE)
_DIFFUSE_PATH_FACTOR = 1.0 / math.cos(
    math.radians(refracted_angle(DIFFUSE_EQUIVALENT_ANGLE))
)


def diffuse_transmission() -> float:
    """Fresnel transmission at the diffuse equivalent angle."""
    return _T_DIFFUSE


def compute_par(
    weather: HourlyWeather,
    biomass: float,
    depth: float,
    epsilon: float,
    kb: float,
) -> PARResult:
    """Dual-path PAR computation for one hour.

    1. Fresnel transmission (solar-elevation dependent for direct, fixed
       for diffuse)
    2. W/m² to µmol/(m²·s) PAR conversion
    3. Beer-Lambert attenuation over the refracted path
    4. Sum of both paths for the culture average

    Args:
        weather: Hourly weather observation.
        biomass: Biomass concentration in g/L.
        depth: Culture depth in m.
        epsilon: Specific extinction coefficient in m²/g.
        kb: Background extinction in 1/m.

    Returns:
        PARResult for the hour.
    """
    theta_direct = max(0.0, 90.0 - weather.solar_elevation)
    t_direct = (
        fresnel_transmission(theta_direct) if weather.solar_elevation > 0 else 0.0
    )
    i_direct = weather.direct_radiation * PAR_COMBINED * t_direct
    i_direct_avg = beer_lambert_avg(
        i_direct, epsilon, biomass, kb, effective_depth(depth, theta_direct)
    )

    i_diffuse = weather.diffuse_radiation * PAR_COMBINED * _T_DIFFUSE
    i_diffuse_avg = beer_lambert_avg(
        i_diffuse, epsilon, biomass, kb, depth * _DIFFUSE_PATH_FACTOR
    )

    f_lighted = lighted_depth_fraction(
        i_direct + i_diffuse, epsilon, biomass, kb, depth
    )

    return PARResult(
        par_direct_surface=i_direct,
        par_diffuse_surface=i_diffuse,
        par_avg_culture=i_direct_avg + i_diffuse_avg,
        fresnel_direct=t_direct,
        f_lighted=f_lighted,
    )
