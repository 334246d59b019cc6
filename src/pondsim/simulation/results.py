"""Summary statistics and export of simulation results.

Records are reduced with numpy and written as CSV (one row per hour) or
JSON (summary, geometry and records).
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import numpy as np

from pondsim.core.state import SimulationSummary, TimestepRecord
from pondsim.physics.constants import HARVEST_START_HOUR

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pondsim.core.config import SimulationConfig
    from pondsim.core.state import SimulationResult

logger = logging.getLogger(__name__)


def timestep_arrays(timesteps: Sequence[TimestepRecord]) -> dict[str, np.ndarray]:
    """Column arrays for every record field.

    Args:
        timesteps: Simulation records.

    Returns:
        Mapping of field name to a 1-D array with one entry per record.
        Integer, boolean and date fields keep their dtype.
    """
    columns: dict[str, np.ndarray] = {}
    for name in TimestepRecord.field_names():
        values = [getattr(t, name) for t in timesteps]
        if name == "weather_date":
            columns[name] = np.asarray(values, dtype=str)
        elif name in ("day", "hour"):
            columns[name] = np.asarray(values, dtype=np.int64)
        elif name == "harvest_occurred":
            columns[name] = np.asarray(values, dtype=bool)
        else:
            columns[name] = np.asarray(values, dtype=np.float64)
    return columns


def summarize_timesteps(
    timesteps: Sequence[TimestepRecord],
    *,
    total_days: int,
    harvest_count: int | None = None,
    final_density: float | None = None,
) -> SimulationSummary:
    """Reduce simulation records to summary statistics.

    Productivity averages only include hours with positive productivity.

    Args:
        timesteps: Simulation records.
        total_days: Number of simulated days.
        harvest_count: Harvest nights; counted from the records when None.
        final_density: Final concentration; taken from the last record
            when None.

    Returns:
        SimulationSummary for the run.
    """
    if not timesteps:
        return SimulationSummary(
            total_days=total_days,
            total_harvested_kg=0.0,
            avg_productivity_areal=0.0,
            avg_productivity_volumetric=0.0,
            avg_temperature=0.0,
            min_temperature=0.0,
            max_temperature=0.0,
            harvest_count=harvest_count or 0,
            final_density=final_density or 0.0,
        )

    cols = timestep_arrays(timesteps)
    productive = cols["productivity_areal"] > 0
    temperature = cols["pond_temperature"]

    if harvest_count is None:
        harvest_count = int(
            np.count_nonzero(
                cols["harvest_occurred"] & (cols["hour"] == HARVEST_START_HOUR)
            )
        )
    if final_density is None:
        final_density = float(cols["biomass_concentration"][-1])

    return SimulationSummary(
        total_days=total_days,
        total_harvested_kg=float(cols["harvest_mass_kg"].sum()),
        avg_productivity_areal=(
            float(cols["productivity_areal"][productive].mean())
            if productive.any()
            else 0.0
        ),
        avg_productivity_volumetric=(
            float(cols["productivity_volumetric"][productive].mean())
            if productive.any()
            else 0.0
        ),
        avg_temperature=float(temperature.mean()),
        min_temperature=float(temperature.min()),
        max_temperature=float(temperature.max()),
        harvest_count=harvest_count,
        final_density=final_density,
        peak_density=float(cols["biomass_concentration"].max()),
        total_evaporation_l=float(cols["evap_l"].sum()),
        total_rainfall_l=float(cols["rainfall_l"].sum()),
        total_makeup_l=float(cols["makeup_l"].sum()),
    )


def config_header_lines(config: SimulationConfig) -> list[str]:
    """``#`` comment lines describing the run configuration."""
    pond = config.pond
    weather = config.weather
    initial_temperature = (
        "air" if pond.initial_temperature is None else f"{pond.initial_temperature} C"
    )
    return [
        f"# {config.name}: {weather.latitude}, {weather.longitude}, "
        f"{weather.source} weather from {weather.start_date.isoformat()}",
        f"# Area: {pond.area_ha} ha, Depth: {pond.depth} m, "
        f"Aspect: {pond.aspect_ratio:.1f}, Berm: {pond.berm_width} m",
        f"# mu_max: {pond.mu_max} /day, i_opt: {pond.i_opt} umol/m2/s, "
        f"t_opt: {pond.t_opt} C, alpha: {pond.alpha}, "
        f"death_rate: {pond.death_rate} /day",
        f"# epsilon: {pond.epsilon} m2/g, kb: {pond.kb} /m, "
        f"harvest: {pond.harvest_mode}",
        f"# Initial density: {pond.initial_density} g/L, "
        f"Initial temp: {initial_temperature}",
    ]


def timesteps_to_csv(
    result: SimulationResult,
    path: str | Path,
    config: SimulationConfig | None = None,
) -> Path:
    """Write one CSV row per timestep.

    Args:
        result: Completed simulation.
        path: Output file path; parent directories are created.
        config: When given, the configuration is written as ``#`` comment
            lines above the header.

    Returns:
        The written path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("w", newline="") as f:
        if config is not None:
            for line in config_header_lines(config):
                f.write(line + "\n")
        writer = csv.DictWriter(f, fieldnames=TimestepRecord.field_names())
        writer.writeheader()
        for record in result.timesteps:
            writer.writerow(record.to_dict())

    logger.info("Wrote %d timesteps to %s", len(result.timesteps), path)
    return path


def result_to_dict(result: SimulationResult) -> dict[str, Any]:
    """JSON-serialisable view of a simulation result."""
    return {
        "summary": result.summary.to_dict(),
        "geometry": result.geometry.to_dict(),
        "timesteps": [t.to_dict() for t in result.timesteps],
    }


def write_json(result: SimulationResult, path: str | Path) -> Path:
    """Write summary, geometry and timesteps as JSON.

    Args:
        result: Completed simulation.
        path: Output file path; parent directories are created.

    Returns:
        The written path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("w") as f:
        json.dump(result_to_dict(result), f, indent=2)

    logger.info("Wrote results to %s", path)
    return path
