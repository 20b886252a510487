"""
Playability validation.

Computes aggregate statistics for a finished grid and checks them against
minimum thresholds. A failed validation is not an error; the generator
reacts to it by regenerating with a perturbed seed.
"""

import math
from typing import Dict, List

import structlog
from pydantic import BaseModel, Field

from .grid import Grid, Terrain

logger = structlog.get_logger()


class ValidationThresholds(BaseModel):
    """Minimum playability thresholds."""

    min_land_fraction: float = Field(default=0.6, description="Min share of non-water tiles")
    max_water_fraction: float = Field(default=0.4, description="Max share of water tiles")


class MapStats(BaseModel):
    """Aggregate grid statistics."""

    tile_counts: Dict[str, int] = Field(description="Tile count per terrain kind")
    settlements: int = Field(description="Settlement count")
    strongholds: int = Field(description="Stronghold count")
    land_fraction: float = Field(description="Share of non-water tiles")
    water_fraction: float = Field(description="Share of water tiles")


class ValidationReport(BaseModel):
    """Result of validating one generation attempt."""

    valid: bool = Field(description="Whether every threshold is met")
    issues: List[str] = Field(default_factory=list, description="Human-readable failures, in check order")
    stats: MapStats = Field(description="Statistics the checks were run against")


def compute_stats(grid: Grid) -> MapStats:
    counts = grid.terrain_counts()
    total = grid.total_tiles
    water = counts[Terrain.WATER]
    return MapStats(
        tile_counts={kind.label: count for kind, count in counts.items()},
        settlements=counts[Terrain.SETTLEMENT],
        strongholds=counts[Terrain.STRONGHOLD],
        land_fraction=1 - water / total,
        water_fraction=water / total,
    )


def validate_map(
    grid: Grid,
    player_count: int,
    thresholds: ValidationThresholds = None,
) -> ValidationReport:
    """
    Check a grid against the playability thresholds.

    Checks, in order: enough settlements for every player, strongholds for
    at least half the players, minimum land share, maximum water share.
    """
    thresholds = thresholds or ValidationThresholds()
    stats = compute_stats(grid)
    issues: List[str] = []

    if stats.settlements < player_count:
        issues.append(
            f"Not enough settlements: {stats.settlements} placed, {player_count} required"
        )

    required_strongholds = math.ceil(player_count / 2)
    if stats.strongholds < required_strongholds:
        issues.append(
            f"Not enough strongholds: {stats.strongholds} placed, {required_strongholds} required"
        )

    if stats.land_fraction < thresholds.min_land_fraction:
        issues.append(
            f"Land percentage too low: {stats.land_fraction:.1%} "
            f"(minimum {thresholds.min_land_fraction:.0%})"
        )

    if stats.water_fraction > thresholds.max_water_fraction:
        issues.append(
            f"Water percentage too high: {stats.water_fraction:.1%} "
            f"(maximum {thresholds.max_water_fraction:.0%})"
        )

    report = ValidationReport(valid=not issues, issues=issues, stats=stats)
    if not report.valid:
        logger.info("Map failed validation", issues=issues)
    return report
