"""Pydantic configuration models for open-pond simulation.

This module defines the configuration schema for pond simulations using
Pydantic v2 models. Configuration can be loaded from YAML or JSON files.

The configuration hierarchy:
- SimulationConfig (top-level)
  - PondConfig
  - WeatherConfig
  - OutputConfig
    - CSVOutputConfig
    - JSONOutputConfig
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from pondsim.core.state import PondGeometry
from pondsim.physics.geometry import compute_geometry
from pondsim.physics.kinetics import LIGHT_RESPONSES, TEMPERATURE_RESPONSES

if TYPE_CHECKING:
    from pondsim.simulation.weather import SyntheticWeatherConfig

HarvestMode = Literal["none", "semi-continuous", "batch"]


class PondConfig(BaseModel):
    """Pond design, culture and harvest parameters.

    Defaults describe a Spirulina raceway: 250 m x 17 m racetrack at
    200 mm depth.
    """

    model_config = ConfigDict(frozen=True)

    # Geometry
    area_ha: Annotated[float, Field(default=0.425, gt=0, description="Area in ha")]
    aspect_ratio: Annotated[
        float, Field(default=250.0 / 17.0, gt=0, description="Length / width")
    ]
    depth: Annotated[float, Field(default=0.2, gt=0, description="Depth in m")]
    berm_width: Annotated[
        float, Field(default=0.8, ge=0, description="Centre divider width in m")
    ]

    # Initial state
    initial_density: Annotated[
        float, Field(default=0.3, ge=0.01, description="Biomass in g/L")
    ]
    initial_temperature: float | None = Field(
        default=25.0,
        description="Initial pond temperature in °C, None for first-hour air",
    )

    # Growth kinetics
    mu_max: Annotated[float, Field(default=4.0, ge=0, description="1/day")]
    i_opt: Annotated[float, Field(default=200.0, gt=0, description="µmol/(m²·s)")]
    t_opt: float = Field(default=30.0, description="Optimal temperature in °C")
    alpha: Annotated[float, Field(default=0.03, ge=0, description="1/°C²")]
    death_rate: Annotated[float, Field(default=0.05, ge=0, description="1/day")]

    # Light attenuation
    epsilon: Annotated[float, Field(default=0.15, ge=0, description="m²/g")]
    kb: Annotated[float, Field(default=0.2, ge=0, description="1/m")]

    # Harvest
    harvest_mode: HarvestMode = "none"
    harvest_threshold: Annotated[float, Field(default=2.0, gt=0, description="g/L")]
    harvest_target: Annotated[float, Field(default=0.3, gt=0, description="g/L")]

    # Model selection
    light_model: str = "steele"
    temperature_model: str = "gaussian"

    @field_validator("light_model")
    @classmethod
    def validate_light_model(cls, v: str) -> str:
        """Ensure the light model is registered."""
        if v not in LIGHT_RESPONSES:
            msg = f"Unknown light model '{v}'. Available: {sorted(LIGHT_RESPONSES)}"
            raise ValueError(msg)
        return v

    @field_validator("temperature_model")
    @classmethod
    def validate_temperature_model(cls, v: str) -> str:
        """Ensure the temperature model is registered."""
        if v not in TEMPERATURE_RESPONSES:
            msg = (
                f"Unknown temperature model '{v}'. "
                f"Available: {sorted(TEMPERATURE_RESPONSES)}"
            )
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def validate_layout(self) -> PondConfig:
        """Ensure the berm leaves a culture surface and harvest targets are ordered."""
        if self.to_geometry().surface_area <= 0:
            msg = (
                f"Berm width ({self.berm_width} m) leaves no culture surface "
                f"for {self.area_ha} ha at aspect ratio {self.aspect_ratio:.2f}"
            )
            raise ValueError(msg)
        if (
            self.harvest_mode == "batch"
            and self.harvest_target >= self.harvest_threshold
        ):
            msg = (
                f"Batch harvest target ({self.harvest_target}) must be below "
                f"threshold ({self.harvest_threshold})"
            )
            raise ValueError(msg)
        return self

    def to_geometry(self) -> PondGeometry:
        """Derive the racetrack geometry."""
        return compute_geometry(
            self.area_ha, self.aspect_ratio, self.depth, self.berm_width
        )


class WeatherConfig(BaseModel):
    """Weather data source configuration."""

    model_config = ConfigDict(frozen=True)

    source: Literal["synthetic", "file"] = Field(default="synthetic")
    file: str | None = Field(
        default=None, description="JSON day list, Open-Meteo response or CSV"
    )
    latitude: Annotated[float, Field(default=33.45, ge=-90, le=90)]
    longitude: Annotated[float, Field(default=-112.07, ge=-180, le=180)]

    # Synthetic weather parameters
    start_date: date = Field(default=date(2024, 6, 15))
    days: Annotated[int, Field(default=14, ge=1)]
    temp_mean: float = 28.0
    temp_amplitude_daily: Annotated[float, Field(default=8.0, ge=0)]
    dew_point_depression: Annotated[float, Field(default=12.0, ge=0)]
    solar_max: Annotated[float, Field(default=1000.0, ge=0)]
    cloud_cover: Annotated[float, Field(default=10.0, ge=0, le=100)]
    wind_mean: Annotated[float, Field(default=3.0, ge=0)]
    rain_hour: Annotated[int, Field(ge=0, le=23)] | None = None
    rain_mm: Annotated[float, Field(default=0.0, ge=0)]

    @model_validator(mode="after")
    def validate_file_source(self) -> WeatherConfig:
        """Ensure a file source names a file."""
        if self.source == "file" and not self.file:
            msg = "Weather source 'file' requires 'file' to be set"
            raise ValueError(msg)
        return self

    def to_synthetic(self) -> SyntheticWeatherConfig:
        """Convert to synthetic generator parameters."""
        from pondsim.simulation.weather import SyntheticWeatherConfig

        return SyntheticWeatherConfig(
            latitude=self.latitude,
            longitude=self.longitude,
            start_date=self.start_date,
            days=self.days,
            temp_mean=self.temp_mean,
            temp_amplitude_daily=self.temp_amplitude_daily,
            dew_point_depression=self.dew_point_depression,
            solar_max=self.solar_max,
            cloud_cover=self.cloud_cover,
            wind_mean=self.wind_mean,
            rain_hour=self.rain_hour,
            rain_mm=self.rain_mm,
        )


class CSVOutputConfig(BaseModel):
    """CSV output configuration."""

    enabled: bool = False
    path: str = "output/timesteps.csv"


class JSONOutputConfig(BaseModel):
    """JSON output configuration."""

    enabled: bool = False
    path: str = "output/results.json"


class OutputConfig(BaseModel):
    """Output destinations configuration."""

    csv: CSVOutputConfig = Field(default_factory=CSVOutputConfig)
    json_: JSONOutputConfig = Field(default_factory=JSONOutputConfig, alias="json")

    model_config = ConfigDict(populate_by_name=True)


class SimulationConfig(BaseModel):
    """Top-level simulation configuration."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(default="Open Pond Simulation")
    total_days: Annotated[int, Field(default=14, ge=1)]
    start_hour: Annotated[int, Field(default=7, ge=0, le=23)]

    pond: PondConfig = Field(default_factory=PondConfig)
    weather: WeatherConfig = Field(default_factory=WeatherConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


def load_config(path: str | Path) -> SimulationConfig:
    """Load simulation configuration from YAML or JSON file.

    Args:
        path: Path to configuration file.

    Returns:
        Validated SimulationConfig object.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ValueError: If configuration is invalid.
    """
    path = Path(path)

    if not path.exists():
        msg = f"Configuration file not found: {path}"
        raise FileNotFoundError(msg)

    with path.open() as f:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    return SimulationConfig.model_validate(data or {})


def save_config(config: SimulationConfig, path: str | Path) -> None:
    """Save simulation configuration to YAML or JSON file.

    Args:
        config: Configuration to save.
        path: Output file path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="json", by_alias=True)

    with path.open("w") as f:
        if path.suffix in (".yaml", ".yml"):
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(data, f, indent=2)


def validate_config(data: dict[str, Any]) -> SimulationConfig:
    """Validate configuration data without loading from file.

    Args:
        data: Configuration dictionary.

    Returns:
        Validated SimulationConfig object.

    Raises:
        ValueError: If configuration is invalid.
    """
    return SimulationConfig.model_validate(data)
