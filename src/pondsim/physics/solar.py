"""Solar geometry and radiation splitting.

Reference: ASHRAE Handbook—Fundamentals (2021), Chapter 14

Used by the weather loaders to attach solar elevation and azimuth to each
hourly observation and by the synthetic weather generator to split global
radiation into direct and diffuse parts.

All angles are in degrees unless otherwise noted.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Final, NamedTuple

#: Solar constant (W/m²)
SOLAR_CONSTANT: Final[float] = 1367.0

#: Earth's axial tilt (degrees)
EARTH_AXIAL_TILT: Final[float] = 23.45


class SolarPosition(NamedTuple):
    """Solar position angles.

    Attributes:
        altitude: Solar altitude (elevation) in degrees, negative below horizon.
        azimuth: Solar azimuth in degrees from North (clockwise).
        zenith: Solar zenith angle in degrees (90 - altitude).
        declination: Solar declination in degrees.
        hour_angle: Solar hour angle in degrees.
    """

    altitude: float
    azimuth: float
    zenith: float
    declination: float
    hour_angle: float


def day_of_year(dt: datetime) -> int:
    """Get day of year (1-366) from datetime."""
    return dt.timetuple().tm_yday


def solar_declination(day: int) -> float:
    """Solar declination angle.

    ASHRAE Handbook—Fundamentals, Chapter 14, Equation 5.

    Args:
        day: Day of year (1-366).

    Returns:
        Declination in degrees.
    """
    return EARTH_AXIAL_TILT * math.sin(math.radians(360.0 * (284 + day) / 365.0))


def equation_of_time(day: int) -> float:
    """Equation of time correction in minutes.

    ASHRAE Handbook—Fundamentals, Chapter 14, Equation 6.
    """
    b = math.radians(360.0 * (day - 81) / 364.0)
    return 9.87 * math.sin(2 * b) - 7.53 * math.cos(b) - 1.5 * math.sin(b)


def solar_time(
    dt: datetime,
    longitude: float,
    *,
    standard_meridian: float | None = None,
) -> float:
    """Apparent solar time as decimal hours.

    Args:
        dt: Local standard time.
        longitude: Site longitude in degrees (positive East).
        standard_meridian: Timezone meridian (defaults to nearest 15°).
    """
    if standard_meridian is None:
        standard_meridian = round(longitude / 15.0) * 15.0

    lst = dt.hour + dt.minute / 60.0 + dt.second / 3600.0
    eot = equation_of_time(day_of_year(dt))

    # 4 minutes per degree between the site and its meridian
    return lst + eot / 60.0 + 4.0 * (longitude - standard_meridian) / 60.0


def solar_position(
    latitude: float,
    longitude: float,
    dt: datetime,
    *,
    standard_meridian: float | None = None,
) -> SolarPosition:
    """Calculate solar position angles.

    Args:
        latitude: Site latitude in degrees (positive North).
        longitude: Site longitude in degrees (positive East).
        dt: Local standard time.
        standard_meridian: Timezone meridian.

    Returns:
        SolarPosition with altitude, azimuth, zenith, declination, hour_angle.

    Examples:
        >>> pos = solar_position(29.65, -82.32, datetime(2024, 6, 21, 12, 30))
        >>> pos.altitude > 75
        True
    """
    decl = solar_declination(day_of_year(dt))
    decl_rad = math.radians(decl)

    ha = 15.0 * (solar_time(dt, longitude, standard_meridian=standard_meridian) - 12.0)
    ha_rad = math.radians(ha)
    lat_rad = math.radians(latitude)

    sin_alt = math.sin(lat_rad) * math.sin(decl_rad) + math.cos(lat_rad) * math.cos(
        decl_rad
    ) * math.cos(ha_rad)
    sin_alt = max(-1.0, min(1.0, sin_alt))
    altitude = math.degrees(math.asin(sin_alt))

    cos_alt = math.cos(math.radians(altitude))
    if cos_alt > 0.001:
        cos_az = (sin_alt * math.sin(lat_rad) - math.sin(decl_rad)) / (
            cos_alt * math.cos(lat_rad)
        )
        cos_az = max(-1.0, min(1.0, cos_az))
        # Measured from South here; convert to degrees from North
        azimuth = 180.0 - math.degrees(math.acos(cos_az))
        if ha > 0:
            azimuth = 360.0 - azimuth
    else:
        azimuth = 180.0

    return SolarPosition(
        altitude=altitude,
        azimuth=azimuth % 360.0,
        zenith=90.0 - altitude,
        declination=decl,
        hour_angle=ha,
    )


def extraterrestrial_radiation(day: int) -> float:
    """Extraterrestrial radiation normal to the sun's rays in W/m².

    ASHRAE Handbook—Fundamentals, Chapter 14, Equation 4.
    """
    return SOLAR_CONSTANT * (1.0 + 0.033 * math.cos(math.radians(360.0 * day / 365.0)))


def diffuse_fraction_erbs(kt: float) -> float:
    """Diffuse fraction of global radiation (Erbs, Klein and Duffie, 1982).

    Args:
        kt: Clearness index (0-1).

    Returns:
        Diffuse fraction (0-1).
    """
    if kt <= 0.22:
        return 1.0 - 0.09 * kt
    if kt <= 0.80:
        return 0.9511 - 0.1604 * kt + 4.388 * kt**2 - 16.638 * kt**3 + 12.336 * kt**4
    return 0.165


def split_global_radiation(
    ghi: float, altitude: float, day: int
) -> tuple[float, float]:
    """Split global horizontal irradiance into direct and diffuse parts.

    Args:
        ghi: Global horizontal irradiance in W/m².
        altitude: Solar altitude in degrees.
        day: Day of year.

    Returns:
        (direct on the horizontal, diffuse horizontal) in W/m².
    """
    if ghi <= 0 or altitude <= 0:
        return 0.0, 0.0
    horizontal_extra = extraterrestrial_radiation(day) * math.sin(math.radians(altitude))
    kt = max(0.0, min(1.0, ghi / horizontal_extra)) if horizontal_extra > 0 else 0.0
    diffuse = ghi * diffuse_fraction_erbs(kt)
    return ghi - diffuse, diffuse
