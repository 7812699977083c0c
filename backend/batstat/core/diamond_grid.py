from __future__ import annotations

import math
from typing import Iterable, Optional, Tuple

from batstat.core.config import GRID_SIZE, HOME_PLATE, TAP_RADIUS_PX
from batstat.core.stat_aggregator import DisplayHit


# Normalized coordinates are always fractions of the field box, so the same
# hit lands in the same spot on any screen size.

def normalize_point(x: float, y: float, width: float, height: float) -> Tuple[float, float]:
    return x / width, y / height


def denormalize_point(nx: float, ny: float, width: float, height: float) -> Tuple[float, float]:
    return nx * width, ny * height


def grid_step(grid_size: int = GRID_SIZE) -> Tuple[float, float]:
    return 1.0 / grid_size, 1.0 / grid_size


def snap_to_grid(nx: float, ny: float, grid_size: int = GRID_SIZE) -> Tuple[float, float]:
    step_x, step_y = grid_step(grid_size)
    return round(nx / step_x) * step_x, round(ny / step_y) * step_y


def home_plate_position() -> Tuple[float, float]:
    return HOME_PLATE


def is_valid_field_position(nx: float, ny: float) -> bool:
    return 0.0 <= nx <= 1.0 and 0.0 <= ny <= 1.0


def nearest_display_hit(
    display_hits: Iterable[DisplayHit],
    x: float,
    y: float,
    width: float,
    height: float,
    radius: float = TAP_RADIUS_PX,
) -> Optional[DisplayHit]:
    """Closest marker to a tap at pixel (x, y), or None if nothing is within radius."""
    closest = None
    closest_distance = math.inf

    for hit in display_hits:
        loc = hit.hit_location
        if loc is None:
            continue
        px, py = loc.to_point(width, height)
        distance = math.hypot(x - px, y - py)
        if distance < closest_distance and distance < radius:
            closest_distance = distance
            closest = hit

    return closest
