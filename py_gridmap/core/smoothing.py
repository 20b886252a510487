"""
Majority-filter terrain smoothing.

One pass over interior tiles. Each tile is considered with a small
probability; a considered tile takes the terrain kind that fills at least
``majority`` cells of its 3x3 neighbourhood. Reads come from a snapshot and
writes are committed after the pass, so changes never cascade within it.
"""

import numpy as np
import structlog
from pydantic import BaseModel, Field

from ..utils.random import probability
from .grid import BUILDING_TERRAINS, TERRAIN_COUNT, Grid
from .lcg_prng import LcgPRNG

logger = structlog.get_logger()


class SmoothingOptions(BaseModel):
    """Smoothing parameters."""

    chance: float = Field(default=0.1, ge=0.0, le=1.0, description="Probability a tile is considered")
    majority: int = Field(default=6, ge=1, le=9, description="Neighbourhood count needed to convert")


def neighborhood_counts(terrain: np.ndarray, x: int, y: int) -> np.ndarray:
    """Terrain kind tally over the 3x3 block centred on ``(x, y)``, self included."""
    block = terrain[y - 1:y + 2, x - 1:x + 2]
    return np.bincount(block.ravel(), minlength=TERRAIN_COUNT)


def smooth_terrain(grid: Grid, prng: LcgPRNG, options: SmoothingOptions = None) -> int:
    """
    Apply one smoothing pass in place.

    Building tiles keep their terrain.

    Returns:
        Number of tiles changed
    """
    options = options or SmoothingOptions()
    snapshot = grid.terrain.copy()
    shadow = grid.terrain.copy()
    changed = 0

    for y in range(1, grid.size - 1):
        for x in range(1, grid.size - 1):
            if not probability(prng, options.chance):
                continue

            counts = neighborhood_counts(snapshot, x, y)
            kind = int(np.argmax(counts))
            if counts[kind] < options.majority:
                continue
            if snapshot[y, x] in BUILDING_TERRAINS or snapshot[y, x] == kind:
                continue

            shadow[y, x] = kind
            changed += 1

    grid.terrain[:] = shadow
    logger.debug("Terrain smoothed", changed=changed)
    return changed
