"""Core module for open-pond simulation.

This module provides the foundational data types for the simulation:
- Pond geometry and culture state
- Per-hour timestep records
- Run summary and result bundle

Configuration models live in ``pondsim.core.config``.
"""

from pondsim.core.state import (
    PondGeometry,
    PondState,
    SimulationResult,
    SimulationSummary,
    TimestepRecord,
)

__all__ = [
    "PondGeometry",
    "PondState",
    "SimulationResult",
    "SimulationSummary",
    "TimestepRecord",
]
