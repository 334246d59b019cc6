"""Racetrack (raceway) pond geometry.

The pond is a slot shape: two straight channels joined by semicircular ends
of radius W/2, split lengthwise by a center berm. The berm runs along the
straight sections only.
"""

from __future__ import annotations

import math

from pondsim.core.state import PondGeometry
from pondsim.physics.constants import (
    LITERS_PER_CUBIC_METER,
    SQUARE_METERS_PER_HECTARE,
)


def compute_geometry(
    area_ha: float,
    aspect_ratio: float,
    depth: float,
    berm_width: float = 0.0,
) -> PondGeometry:
    """Derive racetrack dimensions from design targets.

    Slot area = (L - W)·W + π·(W/2)²; culture area = slot area - berm area.

    Inputs are assumed strictly positive; PondConfig enforces that before a
    simulation run.

    Args:
        area_ha: Reference area W×L in hectares.
        aspect_ratio: Length-to-width ratio L/W.
        depth: Culture depth in m.
        berm_width: Center divider width in m (0 = no berm).

    Returns:
        PondGeometry with width, length, areas, perimeter and volume.

    Examples:
        >>> g = compute_geometry(0.425, 250 / 17, 0.2, 0.8)
        >>> round(g.width, 3), round(g.total_length, 3)
        (17.0, 250.0)
    """
    area = area_ha * SQUARE_METERS_PER_HECTARE
    width = math.sqrt(area / aspect_ratio)
    total_length = area / width

    straight_length = total_length - width
    slot_area = straight_length * width + math.pi * (width / 2.0) ** 2
    surface_area = slot_area - straight_length * berm_width

    # Two straight runs plus one full circle of diameter W
    perimeter = 2.0 * straight_length + math.pi * width

    soil_area = surface_area + perimeter * depth
    volume_m3 = surface_area * depth

    return PondGeometry(
        width=width,
        total_length=total_length,
        surface_area=surface_area,
        perimeter=perimeter,
        soil_area=soil_area,
        volume_m3=volume_m3,
        volume_liters=volume_m3 * LITERS_PER_CUBIC_METER,
    )
