"""State management for open-pond simulation.

This module defines the data structures that describe the pond at any point
of a simulation run:

- PondGeometry: Derived racetrack dimensions (immutable)
- PondState: Biomass, temperature and volume carried between hours
- TimestepRecord: Everything computed for one simulated hour
- SimulationSummary: Aggregate statistics over a completed run
- SimulationResult: Records, summary and geometry of one run
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any


@dataclass(frozen=True)
class PondGeometry:
    """Racetrack pond dimensions derived from design targets.

    Attributes:
        width: Channel (outer) width in m.
        total_length: Total racetrack length in m.
        surface_area: Net culture surface area in m².
        perimeter: Outer perimeter in m.
        soil_area: Ground contact area including side walls in m².
        volume_m3: Nominal culture volume in m³.
        volume_liters: Nominal culture volume in L.
    """

    width: float
    total_length: float
    surface_area: float
    perimeter: float
    soil_area: float
    volume_m3: float
    volume_liters: float

    @property
    def mean_depth(self) -> float:
        """Nominal culture depth in m (volume / surface area)."""
        return self.volume_m3 / self.surface_area

    def to_dict(self) -> dict[str, float]:
        """Convert to a plain dictionary."""
        return asdict(self)


@dataclass
class PondState:
    """Mutable state of the pond culture, owned by the simulation engine.

    Attributes:
        biomass: Biomass concentration in g/L.
        temperature: Pond temperature in °C.
        volume: Culture volume in m³.
        harvest_rate: Concentration removed per hour during tonight's
            harvest window in g/L.
    """

    biomass: float
    temperature: float
    volume: float
    harvest_rate: float = 0.0

    def __post_init__(self) -> None:
        """Validate state values."""
        if self.biomass <= 0:
            msg = f"Biomass must be positive, got {self.biomass}"
            raise ValueError(msg)
        if self.volume <= 0:
            msg = f"Volume must be positive, got {self.volume}"
            raise ValueError(msg)

    @property
    def biomass_mass_kg(self) -> float:
        """Total biomass in the pond in kg (g/L × m³ = kg)."""
        return self.biomass * self.volume


@dataclass(frozen=True)
class TimestepRecord:
    """Complete record of one simulated hour.

    Attributes are grouped as in the simulation loop: time, state after the
    step, growth factors, light, productivity, heat fluxes (W/m²), weather
    inputs, water balance (L) and harvest.
    """

    # Time
    weather_date: str  # date of the weather day used
    day: int
    hour: int

    # State after the step
    biomass_concentration: float  # g/L
    pond_temperature: float  # °C
    culture_volume: float  # m³

    # Growth
    net_growth_rate: float  # /day, scaled by lighted fraction
    light_factor: float
    temperature_factor: float
    nutrient_factor: float
    lighted_depth_fraction: float

    # Light
    par_direct_surface: float  # µmol/(m²·s)
    par_diffuse_surface: float  # µmol/(m²·s)
    par_avg_culture: float  # µmol/(m²·s)
    fresnel_transmission_direct: float

    # Productivity
    productivity_volumetric: float  # g/(L·day)
    productivity_areal: float  # g/(m²·day)

    # Heat fluxes
    q_solar: float
    q_longwave_in: float
    q_longwave_out: float
    q_evap: float
    q_convection: float
    q_conduction: float
    q_biomass: float
    q_net: float

    # Weather inputs
    air_temperature: float
    dew_point: float
    relative_humidity: float
    cloud_cover: float
    wind_speed_10m: float
    wind_speed_2m: float
    direct_radiation: float
    diffuse_radiation: float
    solar_elevation: float
    soil_temperature: float
    precipitation: float

    # Water balance
    evap_l: float
    rainfall_l: float
    makeup_l: float
    harvest_water_removed_l: float
    harvest_water_returned_l: float

    # Harvest
    harvest_occurred: bool
    harvest_mass_kg: float

    @classmethod
    def field_names(cls) -> list[str]:
        """Field names in declaration order (CSV header order)."""
        return [f.name for f in fields(cls)]

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary."""
        return asdict(self)


@dataclass(frozen=True)
class SimulationSummary:
    """Aggregate statistics over a completed simulation run.

    Attributes:
        total_days: Number of simulated days.
        total_harvested_kg: Total harvested biomass in kg.
        avg_productivity_areal: Mean areal productivity over productive hours
            in g/(m²·day).
        avg_productivity_volumetric: Mean volumetric productivity over
            productive hours in g/(L·day).
        avg_temperature: Mean pond temperature in °C.
        min_temperature: Minimum pond temperature in °C.
        max_temperature: Maximum pond temperature in °C.
        harvest_count: Number of nights with a harvest.
        final_density: Biomass concentration after the last hour in g/L.
        peak_density: Highest biomass concentration reached in g/L.
        total_evaporation_l: Water evaporated over the run in L.
        total_rainfall_l: Rain collected over the run in L.
        total_makeup_l: Fresh water added over the run in L.
    """

    total_days: int
    total_harvested_kg: float
    avg_productivity_areal: float
    avg_productivity_volumetric: float
    avg_temperature: float
    min_temperature: float
    max_temperature: float
    harvest_count: int
    final_density: float
    peak_density: float = 0.0
    total_evaporation_l: float = 0.0
    total_rainfall_l: float = 0.0
    total_makeup_l: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary."""
        return asdict(self)


@dataclass(frozen=True)
class SimulationResult:
    """Output of a completed simulation run.

    Attributes:
        timesteps: One record per simulated hour, in order.
        summary: Aggregate statistics.
        geometry: Pond geometry used for the run.
    """

    timesteps: tuple[TimestepRecord, ...]
    summary: SimulationSummary
    geometry: PondGeometry
