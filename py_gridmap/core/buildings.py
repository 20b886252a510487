"""
Building placement.

Places settlements and then strongholds by rejection sampling. A candidate
tile is accepted when it is off the outer ring, its terrain can carry a
building, and it keeps the kind's minimum spacing to every building placed
so far (of either kind). Falling short of the target is logged and reported,
not raised; the validator decides whether the map is still playable.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

import numpy as np
import structlog
from pydantic import BaseModel, Field

from ..utils.random import rand_int
from .grid import BUILDING_TERRAINS, Grid, Terrain
from .lcg_prng import LcgPRNG

logger = structlog.get_logger()

UNBUILDABLE_TERRAINS = frozenset({Terrain.WATER, Terrain.MOUNTAIN}) | BUILDING_TERRAINS


class BuildingOptions(BaseModel):
    """Building placement parameters."""

    settlement_spacing: float = Field(default=5.0, description="Min distance from a new settlement to any building")
    stronghold_spacing: float = Field(default=8.0, description="Min distance from a new stronghold to any building")
    settlement_size_divisor: int = Field(default=20, ge=1, description="Grid size per extra settlement per player")
    stronghold_ratio_divisor: int = Field(default=3, ge=1, description="Settlements per stronghold")

    def spacing_for(self, kind: Terrain) -> float:
        if kind == Terrain.SETTLEMENT:
            return self.settlement_spacing
        if kind == Terrain.STRONGHOLD:
            return self.stronghold_spacing
        raise ValueError(f"{kind!r} is not a building kind")


@dataclass
class BuildingPlacement:
    """A placed building."""

    x: int
    y: int
    kind: Terrain


@dataclass
class PlacementResult:
    """Outcome of building placement."""

    placements: List[BuildingPlacement] = field(default_factory=list)
    targets: Dict[Terrain, int] = field(default_factory=dict)
    attempts: Dict[Terrain, int] = field(default_factory=dict)

    def placed(self, kind: Terrain) -> int:
        return sum(1 for p in self.placements if p.kind == kind)

    def shortfall(self, kind: Terrain) -> int:
        return max(0, self.targets.get(kind, 0) - self.placed(kind))

    @property
    def complete(self) -> bool:
        return all(self.shortfall(kind) == 0 for kind in self.targets)


def building_targets(size: int, player_count: int, options: BuildingOptions = None) -> Dict[Terrain, int]:
    """
    Target building counts for a grid size and player count.

    Returns:
        Mapping of building kind to desired count
    """
    options = options or BuildingOptions()
    settlements_per_player = max(1, size // options.settlement_size_divisor)
    total_settlements = player_count * settlements_per_player
    total_strongholds = max(player_count, total_settlements // options.stronghold_ratio_divisor)
    return {Terrain.SETTLEMENT: total_settlements, Terrain.STRONGHOLD: total_strongholds}


class BuildingPlacer:
    """Rejection-sampling building placement over a grid."""

    def __init__(
        self,
        grid: Grid,
        prng: LcgPRNG,
        player_count: int,
        options: BuildingOptions = None,
    ):
        self.grid = grid
        self.prng = prng
        self.player_count = player_count
        self.options = options or BuildingOptions()
        self.size = grid.size
        self.placements: List[BuildingPlacement] = []

    def place(self) -> PlacementResult:
        """Place settlements, then strongholds."""
        targets = building_targets(self.size, self.player_count, self.options)
        result = PlacementResult(targets=targets)

        for kind in (Terrain.SETTLEMENT, Terrain.STRONGHOLD):
            result.attempts[kind] = self._place_kind(kind, targets[kind])

        result.placements = list(self.placements)

        for kind in targets:
            if result.shortfall(kind):
                logger.warning(
                    "Building placement fell short",
                    kind=kind.label,
                    placed=result.placed(kind),
                    target=targets[kind],
                    attempts=result.attempts[kind],
                )

        logger.debug(
            "Buildings placed",
            settlements=result.placed(Terrain.SETTLEMENT),
            strongholds=result.placed(Terrain.STRONGHOLD),
        )
        return result

    def _place_kind(self, kind: Terrain, target: int) -> int:
        """Place up to ``target`` buildings of one kind. Returns attempts used."""
        max_attempts = self.size * self.size
        spacing = self.options.spacing_for(kind)
        placed = 0
        attempts = 0

        while placed < target and attempts < max_attempts:
            attempts += 1
            x = rand_int(self.prng, self.size)
            y = rand_int(self.prng, self.size)

            if not self.can_place(x, y, spacing):
                continue

            self.grid.set_terrain(x, y, kind)
            self.placements.append(BuildingPlacement(x=x, y=y, kind=kind))
            placed += 1

        return attempts

    def can_place(self, x: int, y: int, spacing: float) -> bool:
        """Check boundary, terrain suitability and spacing for a candidate tile."""
        if not self.grid.is_interior(x, y):
            return False
        if self.grid.get_terrain(x, y) in UNBUILDABLE_TERRAINS:
            return False
        return self.nearest_building_distance(x, y) >= spacing

    def nearest_building_distance(self, x: int, y: int) -> float:
        """Distance to the closest placed building, ``inf`` if none."""
        if not self.placements:
            return float("inf")
        positions = np.array([(p.x, p.y) for p in self.placements], dtype=np.float64)
        deltas = positions - np.array([x, y], dtype=np.float64)
        return float(np.sqrt((deltas ** 2).sum(axis=1)).min())


def building_positions(grid: Grid) -> List[Tuple[int, int, Terrain]]:
    """All building tiles on a grid as ``(x, y, kind)``, strongholds first."""
    positions = []
    for kind in (Terrain.STRONGHOLD, Terrain.SETTLEMENT):
        positions.extend((x, y, kind) for x, y in grid.positions_of(kind))
    return positions
