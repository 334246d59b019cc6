"""Weather input for open-pond simulation.

The engine consumes a list of WeatherDay objects, each holding exactly 24
HourlyWeather observations. This module builds that list from:
- JSON day lists (snake_case, or the camelCase keys of downloaded datasets)
- Open-Meteo archive responses saved to disk
- Hourly CSV files
- A deterministic synthetic generator

It also reduces a multi-day record to a single typical day.
"""

from __future__ import annotations

import csv
import json
import logging
import math
from dataclasses import asdict, dataclass, field, fields
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pondsim.physics.heat_balance import saturation_vapor_pressure
from pondsim.physics.solar import (
    day_of_year,
    solar_position,
    split_global_radiation,
)

if TYPE_CHECKING:
    from pondsim.core.config import WeatherConfig

logger = logging.getLogger(__name__)

#: Hourly fields requested from the Open-Meteo archive API
OPEN_METEO_FIELDS: dict[str, str] = {
    "temperature": "temperature_2m",
    "relative_humidity": "relative_humidity_2m",
    "dew_point": "dew_point_2m",
    "cloud_cover": "cloud_cover",
    "wind_speed": "wind_speed_10m",
    "wind_direction": "wind_direction_10m",
    "precipitation": "precipitation",
    "direct_radiation": "direct_radiation",
    "diffuse_radiation": "diffuse_radiation",
    "shortwave_radiation": "shortwave_radiation",
    "soil_temperature": "soil_temperature_7_to_28cm",
}

# camelCase keys used by downloaded season datasets
_CAMEL_CASE_KEYS: dict[str, str] = {
    "relativeHumidity": "relative_humidity",
    "dewPoint": "dew_point",
    "cloudCover": "cloud_cover",
    "windSpeed": "wind_speed",
    "windDirection": "wind_direction",
    "directRadiation": "direct_radiation",
    "diffuseRadiation": "diffuse_radiation",
    "shortwaveRadiation": "shortwave_radiation",
    "soilTemperature": "soil_temperature",
    "solarElevation": "solar_elevation",
    "solarAzimuth": "solar_azimuth",
}


@dataclass(frozen=True)
class HourlyWeather:
    """One hour of weather observation.

    Attributes:
        hour: Local hour of day (0-23).
        temperature: Air temperature at 2 m in °C.
        relative_humidity: Relative humidity (0-100 %).
        dew_point: Dew point in °C.
        cloud_cover: Cloud cover (0-100 %).
        wind_speed: Wind speed at 10 m in m/s.
        wind_direction: Wind direction at 10 m in degrees from North.
        precipitation: Precipitation over the hour in mm.
        direct_radiation: Direct beam on the horizontal in W/m².
        diffuse_radiation: Diffuse horizontal radiation in W/m².
        shortwave_radiation: Global horizontal irradiance in W/m².
        soil_temperature: Soil temperature (7-28 cm) in °C.
        solar_elevation: Solar elevation in degrees above the horizon.
        solar_azimuth: Solar azimuth in degrees from North.
    """

    hour: int
    temperature: float
    relative_humidity: float
    dew_point: float
    cloud_cover: float
    wind_speed: float
    wind_direction: float
    precipitation: float
    direct_radiation: float
    diffuse_radiation: float
    shortwave_radiation: float
    soil_temperature: float
    solar_elevation: float
    solar_azimuth: float

    def __post_init__(self) -> None:
        """Validate observation values."""
        if not 0 <= self.hour <= 23:
            msg = f"Hour must be between 0 and 23, got {self.hour}"
            raise ValueError(msg)
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, float) and not math.isfinite(value):
                msg = f"Weather field '{f.name}' must be finite, got {value}"
                raise ValueError(msg)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HourlyWeather:
        """Build from a mapping with snake_case or camelCase keys.

        Raises:
            ValueError: If a field is missing or not numeric.
        """
        normalized = {_CAMEL_CASE_KEYS.get(k, k): v for k, v in data.items()}
        values: dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in normalized or normalized[f.name] is None:
                msg = f"Weather record is missing '{f.name}'"
                raise ValueError(msg)
            raw = normalized[f.name]
            try:
                values[f.name] = int(raw) if f.name == "hour" else float(raw)
            except (TypeError, ValueError) as e:
                msg = f"Weather field '{f.name}' has invalid value {raw!r}"
                raise ValueError(msg) from e
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary."""
        return asdict(self)


@dataclass(frozen=True)
class WeatherDay:
    """Hourly observations for one calendar day.

    Attributes:
        date: ISO date string (YYYY-MM-DD).
        hours: Exactly 24 observations ordered by hour 0-23.
    """

    date: str
    hours: tuple[HourlyWeather, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate that the day is complete and ordered."""
        object.__setattr__(self, "hours", tuple(self.hours))
        if len(self.hours) != 24:
            msg = f"Weather day {self.date} has {len(self.hours)} hours, expected 24"
            raise ValueError(msg)
        if [h.hour for h in self.hours] != list(range(24)):
            msg = f"Weather day {self.date} hours must be ordered 0-23"
            raise ValueError(msg)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WeatherDay:
        """Build from a ``{"date": ..., "hours": [...]}`` mapping."""
        hours = sorted(
            (HourlyWeather.from_dict(h) for h in data.get("hours", [])),
            key=lambda h: h.hour,
        )
        return cls(date=str(data.get("date", "")), hours=tuple(hours))

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary."""
        return {"date": self.date, "hours": [h.to_dict() for h in self.hours]}


# =============================================================================
# Helpers
# =============================================================================


def dew_point_from_humidity(temperature: float, relative_humidity: float) -> float:
    """Dew point from air temperature and relative humidity (inverse Magnus).

    Args:
        temperature: Air temperature in °C.
        relative_humidity: Relative humidity (0-100 %).

    Returns:
        Dew point in °C.
    """
    rh = max(1.0, min(100.0, relative_humidity))
    gamma = math.log(rh / 100.0) + 17.27 * temperature / (temperature + 237.3)
    return 237.3 * gamma / (17.27 - gamma)


def _solar_angles(
    latitude: float, longitude: float, day: str, hour: int
) -> tuple[float, float]:
    """Solar elevation and azimuth at the middle of a local hour.

    Local clock time is taken as mean solar time at the site longitude.
    """
    dt = datetime.fromisoformat(day) + timedelta(hours=hour, minutes=30)
    pos = solar_position(latitude, longitude, dt, standard_meridian=longitude)
    return round(pos.altitude, 1), round(pos.azimuth, 1)


def _group_into_days(
    records: dict[str, dict[int, HourlyWeather]], source: str
) -> list[WeatherDay]:
    """Assemble complete days in date order, dropping incomplete ones."""
    days: list[WeatherDay] = []
    for day in sorted(records):
        hours = records[day]
        if len(hours) != 24:
            logger.warning(
                "Dropping incomplete day %s from %s (%d of 24 hours)",
                day,
                source,
                len(hours),
            )
            continue
        days.append(WeatherDay(date=day, hours=tuple(hours[h] for h in range(24))))
    return days


# =============================================================================
# File Loaders
# =============================================================================


def parse_open_meteo(
    payload: dict[str, Any], latitude: float, longitude: float
) -> list[WeatherDay]:
    """Group an Open-Meteo archive response into weather days.

    Solar elevation and azimuth are computed for the middle of each hour.

    Args:
        payload: Decoded JSON response with an ``hourly`` block.
        latitude: Site latitude in degrees.
        longitude: Site longitude in degrees.

    Returns:
        Complete days in date order.

    Raises:
        ValueError: If the payload has no hourly data.
    """
    hourly = payload.get("hourly")
    if not isinstance(hourly, dict) or "time" not in hourly:
        msg = "Open-Meteo payload has no 'hourly.time' block"
        raise ValueError(msg)

    missing = [name for name in OPEN_METEO_FIELDS.values() if name not in hourly]
    if missing:
        msg = f"Open-Meteo payload is missing hourly fields: {missing}"
        raise ValueError(msg)

    records: dict[str, dict[int, HourlyWeather]] = {}
    for i, stamp in enumerate(hourly["time"]):
        day, hour = stamp[:10], int(stamp[11:13])
        values = {key: hourly[name][i] for key, name in OPEN_METEO_FIELDS.items()}
        if any(v is None for v in values.values()):
            logger.warning("Skipping %s in Open-Meteo data: missing values", stamp)
            continue
        elevation, azimuth = _solar_angles(latitude, longitude, day, hour)
        records.setdefault(day, {})[hour] = HourlyWeather(
            hour=hour,
            solar_elevation=elevation,
            solar_azimuth=azimuth,
            **{k: float(v) for k, v in values.items()},
        )

    return _group_into_days(records, "Open-Meteo data")


def load_weather_days(
    path: str | Path,
    latitude: float | None = None,
    longitude: float | None = None,
) -> list[WeatherDay]:
    """Load weather days from a JSON file.

    Accepts a list of ``{"date", "hours"}`` objects, a season dataset with
    a ``raw`` key, or a saved Open-Meteo archive response (which needs
    ``latitude`` and ``longitude``, falling back to the file's own).

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the content is not a recognised weather format.
    """
    path = Path(path)
    if not path.exists():
        msg = f"Weather file not found: {path}"
        raise FileNotFoundError(msg)

    with path.open() as f:
        data = json.load(f)

    if isinstance(data, dict) and "hourly" in data:
        lat = latitude if latitude is not None else data.get("latitude")
        lon = longitude if longitude is not None else data.get("longitude")
        if lat is None or lon is None:
            msg = f"Open-Meteo file {path} needs a latitude and longitude"
            raise ValueError(msg)
        return parse_open_meteo(data, float(lat), float(lon))

    if isinstance(data, dict) and "raw" in data:
        data = data["raw"]

    if not isinstance(data, list):
        msg = f"Unrecognised weather file format: {path}"
        raise ValueError(msg)

    days = [WeatherDay.from_dict(d) for d in data]
    logger.debug("Loaded %d weather days from %s", len(days), path)
    return days


def load_weather_csv(
    path: str | Path,
    latitude: float,
    longitude: float,
) -> list[WeatherDay]:
    """Load hourly weather from a CSV file.

    Requires ``timestamp`` (ISO format, local time) and ``temperature``
    columns. Other fields fall back to defaults and are reported once:
    dew point is derived from humidity, direct and diffuse radiation are
    split from shortwave radiation, and solar angles are computed.

    Args:
        path: CSV file path.
        latitude: Site latitude in degrees.
        longitude: Site longitude in degrees.

    Returns:
        Complete days in date order.

    Raises:
        FileNotFoundError: If the file doesn't exist.
    """
    path = Path(path)
    if not path.exists():
        msg = f"Weather file not found: {path}"
        raise FileNotFoundError(msg)

    defaults: dict[str, float] = {
        "relative_humidity": 50.0,
        "cloud_cover": 0.0,
        "wind_speed": 2.0,
        "wind_direction": 180.0,
        "precipitation": 0.0,
        "shortwave_radiation": 0.0,
    }
    columns_with_defaults: set[str] = set()
    records: dict[str, dict[int, HourlyWeather]] = {}
    skipped_rows = 0

    def get_float(row: dict[str, str], column: str) -> float | None:
        value = row.get(column)
        if value is None or value == "":
            return None
        try:
            return float(value)
        except ValueError as e:
            msg = f"Column '{column}' has invalid value '{value}'"
            raise ValueError(msg) from e

    def get_float_or_default(row: dict[str, str], column: str) -> float:
        value = get_float(row, column)
        if value is None:
            columns_with_defaults.add(column)
            return defaults[column]
        return value

    with path.open(newline="") as f:
        reader = csv.DictReader(f)
        for row_num, row in enumerate(reader, start=2):
            try:
                stamp = datetime.fromisoformat(row["timestamp"])
                temperature = get_float(row, "temperature")
                if temperature is None:
                    msg = "temperature is empty"
                    raise ValueError(msg)
                rh = get_float_or_default(row, "relative_humidity")
                ghi = get_float_or_default(row, "shortwave_radiation")
                day = stamp.date().isoformat()
                elevation, azimuth = _solar_angles(latitude, longitude, day, stamp.hour)

                dew_point = get_float(row, "dew_point")
                if dew_point is None:
                    columns_with_defaults.add("dew_point")
                    dew_point = dew_point_from_humidity(temperature, rh)

                direct = get_float(row, "direct_radiation")
                diffuse = get_float(row, "diffuse_radiation")
                if direct is None or diffuse is None:
                    columns_with_defaults.update({"direct_radiation", "diffuse_radiation"})
                    direct, diffuse = split_global_radiation(
                        ghi, elevation, day_of_year(stamp)
                    )

                soil = get_float(row, "soil_temperature")
                if soil is None:
                    columns_with_defaults.add("soil_temperature")
                    soil = temperature

                records.setdefault(day, {})[stamp.hour] = HourlyWeather(
                    hour=stamp.hour,
                    temperature=temperature,
                    relative_humidity=rh,
                    dew_point=dew_point,
                    cloud_cover=get_float_or_default(row, "cloud_cover"),
                    wind_speed=get_float_or_default(row, "wind_speed"),
                    wind_direction=get_float_or_default(row, "wind_direction"),
                    precipitation=get_float_or_default(row, "precipitation"),
                    direct_radiation=direct,
                    diffuse_radiation=diffuse,
                    shortwave_radiation=ghi,
                    soil_temperature=soil,
                    solar_elevation=elevation,
                    solar_azimuth=azimuth,
                )
            except KeyError as e:
                skipped_rows += 1
                logger.warning(
                    "Skipping row %d in %s: missing column %s", row_num, path, e
                )
            except ValueError as e:
                skipped_rows += 1
                logger.warning(
                    "Skipping row %d in %s: invalid value - %s", row_num, path, e
                )

    if columns_with_defaults:
        logger.warning(
            "CSV file %s: columns not found, using defaults: %s",
            path,
            ", ".join(sorted(columns_with_defaults)),
        )

    days = _group_into_days(records, str(path))
    if skipped_rows > 0:
        logger.info(
            "Loaded %d weather days from %s (%d rows skipped)",
            len(days),
            path,
            skipped_rows,
        )
    return days


# =============================================================================
# Typical Day
# =============================================================================


def _circular_mean(angles: list[float]) -> float:
    """Mean of angles in degrees, in [0, 360)."""
    sin_sum = sum(math.sin(math.radians(a)) for a in angles)
    cos_sum = sum(math.cos(math.radians(a)) for a in angles)
    return (math.degrees(math.atan2(sin_sum, cos_sum)) + 360.0) % 360.0


def average_days(days: list[WeatherDay]) -> WeatherDay:
    """Average several days hour by hour into one typical day.

    Wind direction and solar azimuth use circular means. Values are
    rounded to one decimal; wind direction to whole degrees.

    Raises:
        ValueError: If no days are given.
    """
    if not days:
        msg = "Cannot average an empty list of weather days"
        raise ValueError(msg)

    linear = [
        f.name
        for f in fields(HourlyWeather)
        if f.name not in ("hour", "wind_direction", "solar_azimuth")
    ]
    hours: list[HourlyWeather] = []
    for h in range(24):
        entries = [day.hours[h] for day in days]
        values: dict[str, Any] = {
            name: round(sum(getattr(e, name) for e in entries) / len(entries), 1)
            for name in linear
        }
        wind_dir = round(_circular_mean([e.wind_direction for e in entries]))
        values["wind_direction"] = float(wind_dir % 360)
        values["solar_azimuth"] = round(
            _circular_mean([e.solar_azimuth for e in entries]), 1
        )
        hours.append(HourlyWeather(hour=h, **values))

    return WeatherDay(date=f"{days[0].date}/{days[-1].date}", hours=tuple(hours))


# =============================================================================
# Synthetic Weather
# =============================================================================


@dataclass
class SyntheticWeatherConfig:
    """Configuration for synthetic weather generation.

    Attributes:
        latitude: Site latitude in degrees.
        longitude: Site longitude in degrees.
        start_date: First generated day.
        days: Number of days to generate.
        temp_mean: Daily mean air temperature in °C.
        temp_amplitude_daily: Half the daily temperature swing in °C.
        dew_point_depression: Mean air temperature minus dew point in °C.
        solar_max: Clear-sky global irradiance at zenith in W/m².
        cloud_cover: Cloud cover (0-100 %).
        wind_mean: Mean 10 m wind speed in m/s.
        rain_hour: Hour of a daily shower, or None for a dry period.
        rain_mm: Rain depth of the daily shower in mm.
    """

    latitude: float = 33.45
    longitude: float = -112.07
    start_date: date = field(default_factory=lambda: date(2024, 6, 15))
    days: int = 14
    temp_mean: float = 28.0
    temp_amplitude_daily: float = 8.0
    dew_point_depression: float = 12.0
    solar_max: float = 1000.0
    cloud_cover: float = 10.0
    wind_mean: float = 3.0
    rain_hour: int | None = None
    rain_mm: float = 0.0


def generate_synthetic_days(
    config: SyntheticWeatherConfig | None = None,
) -> list[WeatherDay]:
    """Generate deterministic weather days.

    - Temperature: sinusoidal daily cycle, warmest at 15:00
    - Dew point: fixed depression below the daily mean, never above air
      temperature
    - Solar: clear-sky irradiance following the sun's elevation, reduced
      by cloud cover and split with the Erbs correlation
    - Wind: calmer at night, strongest in the afternoon

    Args:
        config: Generation parameters.

    Returns:
        ``config.days`` complete weather days.
    """
    config = config or SyntheticWeatherConfig()
    cloud_fraction = max(0.0, min(1.0, config.cloud_cover / 100.0))
    dew_point_base = config.temp_mean - config.dew_point_depression

    days: list[WeatherDay] = []
    for i in range(config.days):
        current = config.start_date + timedelta(days=i)
        doy = current.timetuple().tm_yday
        iso = current.isoformat()
        hours: list[HourlyWeather] = []
        for h in range(24):
            elevation, azimuth = _solar_angles(
                config.latitude, config.longitude, iso, h
            )
            temperature = config.temp_mean + config.temp_amplitude_daily * math.cos(
                2 * math.pi * (h - 15) / 24
            )
            dew_point = min(temperature, dew_point_base)
            rh = 100.0 * saturation_vapor_pressure(dew_point) / saturation_vapor_pressure(
                temperature
            )

            if elevation > 0:
                ghi = (
                    config.solar_max
                    * math.sin(math.radians(elevation))
                    * (1.0 - 0.75 * cloud_fraction)
                )
            else:
                ghi = 0.0
            direct, diffuse = split_global_radiation(ghi, elevation, doy)

            wind = config.wind_mean * (1.0 + 0.3 * math.sin(2 * math.pi * (h - 9) / 24))
            rain = config.rain_mm if config.rain_hour == h else 0.0

            hours.append(
                HourlyWeather(
                    hour=h,
                    temperature=temperature,
                    relative_humidity=rh,
                    dew_point=dew_point,
                    cloud_cover=config.cloud_cover,
                    wind_speed=max(0.0, wind),
                    wind_direction=(180.0 + 90.0 * math.sin(doy * 0.05)) % 360.0,
                    precipitation=rain,
                    direct_radiation=direct,
                    diffuse_radiation=diffuse,
                    shortwave_radiation=ghi,
                    soil_temperature=config.temp_mean,
                    solar_elevation=elevation,
                    solar_azimuth=azimuth,
                )
            )
        days.append(WeatherDay(date=iso, hours=tuple(hours)))

    return days


def weather_from_config(config: WeatherConfig) -> list[WeatherDay]:
    """Build weather days from a weather configuration.

    Raises:
        ValueError: If a file source has no path or yields no days.
        FileNotFoundError: If the weather file doesn't exist.
    """
    if config.source == "synthetic":
        return generate_synthetic_days(config.to_synthetic())

    if not config.file:
        msg = "Weather source 'file' requires a file path"
        raise ValueError(msg)

    path = Path(config.file)
    if path.suffix.lower() == ".csv":
        days = load_weather_csv(path, config.latitude, config.longitude)
    else:
        days = load_weather_days(path, config.latitude, config.longitude)

    if not days:
        msg = f"No complete weather days found in {path}"
        raise ValueError(msg)
    return days
