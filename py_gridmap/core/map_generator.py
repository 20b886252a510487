"""
Map generation pipeline.

Process per attempt:
1. Derive the attempt seed from the game id seed
2. Create a fresh random stream and grid
3. Synthesize terrain
4. Place buildings
5. Smooth terrain
6. Repair land connectivity
7. Validate

A failed validation triggers another attempt with seed ``base_seed ^ attempt``,
up to ``max_attempts``. The grid of an attempt belongs to that attempt until
it is returned to the caller.
"""

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

import structlog
from pydantic import BaseModel, ConfigDict, Field

from ..config.config import settings
from .buildings import BuildingOptions, BuildingPlacer, PlacementResult
from .connectivity import ConnectivityOptions, ConnectivityReport, repair_connectivity
from .grid import Grid
from .lcg_prng import LcgPRNG, attempt_seed, create_seed
from .smoothing import SmoothingOptions, smooth_terrain
from .starting_positions import assign_starting_positions
from .terrain import TerrainOptions, TerrainSynthesizer
from .validation import ValidationReport, ValidationThresholds, validate_map

logger = structlog.get_logger()


class GenerationOptions(BaseModel):
    """Parameters for every pipeline stage."""

    terrain: TerrainOptions = Field(default_factory=TerrainOptions)
    buildings: BuildingOptions = Field(default_factory=BuildingOptions)
    smoothing: SmoothingOptions = Field(default_factory=SmoothingOptions)
    connectivity: ConnectivityOptions = Field(default_factory=ConnectivityOptions)
    thresholds: ValidationThresholds = Field(default_factory=ValidationThresholds)


@dataclass
class AttemptResult:
    """One pass through the pipeline."""

    attempt: int
    seed: int
    grid: Grid
    prng: LcgPRNG
    placement: PlacementResult
    connectivity: ConnectivityReport
    validation: ValidationReport


class GeneratedMap(BaseModel):
    """Finished map handed over to the server and renderer."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    game_id: str = Field(description="Game identifier the map was generated for")
    grid: Grid = Field(description="Terrain grid")
    size: int = Field(description="Grid dimension")
    player_count: int = Field(description="Players the map was balanced for")
    seed: int = Field(description="Seed derived from the game id")
    attempt_seed: int = Field(description="Seed of the attempt that produced the grid")
    attempts: int = Field(description="Attempts used, 1 if the first map validated")
    generated_at: datetime = Field(description="Generation timestamp (UTC)")
    generation_time_seconds: float = Field(default=0.0)
    validation: ValidationReport = Field(description="Validation of the returned grid")
    player_ids: List[str] = Field(default_factory=list, description="Players starting positions were requested for")
    starting_positions: Dict[str, Tuple[int, int]] = Field(default_factory=dict)

    def to_dict(self, include_grid: bool = True) -> Dict[str, Any]:
        """Outbound structure for the renderer and network layer."""
        data = {
            "game_id": self.game_id,
            "size": self.size,
            "player_count": self.player_count,
            "seed": self.seed,
            "attempt_seed": self.attempt_seed,
            "attempts": self.attempts,
            "generated_at": self.generated_at.isoformat(),
            "generation_time_seconds": self.generation_time_seconds,
            "validation": self.validation.model_dump(),
            "player_ids": list(self.player_ids),
            "starting_positions": {
                player: list(position) for player, position in self.starting_positions.items()
            },
        }
        if include_grid:
            data["grid"] = self.grid.to_rows()
        return data


def _check_inputs(game_id: str, size: int, player_count: int) -> None:
    if not isinstance(game_id, str) or not game_id.strip():
        raise ValueError("Game identifier must be a non-empty string")
    if not isinstance(size, int) or isinstance(size, bool) or size < 1:
        raise ValueError(f"Map size must be a positive integer, got {size!r}")
    if not isinstance(player_count, int) or isinstance(player_count, bool) or player_count < 1:
        raise ValueError(f"Player count must be a positive integer, got {player_count!r}")


class MapGenerator:
    """
    Deterministic map generator.

    The same ``(game_id, size, player_count)`` always yields the same map.
    """

    def __init__(self, options: GenerationOptions = None, max_attempts: Optional[int] = None):
        """
        Initialize the generator.

        Args:
            options: Stage parameters
            max_attempts: Attempts before returning an invalid map; defaults
                to ``settings.max_generation_attempts``
        """
        self.options = options or GenerationOptions()
        self.max_attempts = max_attempts if max_attempts is not None else settings.max_generation_attempts
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")

    def run_attempt(self, seed: int, size: int, player_count: int, attempt: int = 0) -> AttemptResult:
        """Run the pipeline once for a given seed."""
        prng = LcgPRNG(seed)
        grid = Grid(size)

        TerrainSynthesizer(grid, prng, self.options.terrain).generate()
        placement = BuildingPlacer(grid, prng, player_count, self.options.buildings).place()
        smooth_terrain(grid, prng, self.options.smoothing)
        connectivity = repair_connectivity(grid, self.options.connectivity)
        validation = validate_map(grid, player_count, self.options.thresholds)

        return AttemptResult(
            attempt=attempt,
            seed=seed,
            grid=grid,
            prng=prng,
            placement=placement,
            connectivity=connectivity,
            validation=validation,
        )

    def generate(
        self,
        game_id: str,
        size: int,
        player_count: int,
        player_ids: Optional[Sequence[str]] = None,
    ) -> GeneratedMap:
        """
        Generate a validated map for a game.

        Args:
            game_id: Non-empty game identifier, the only source of entropy
            size: Grid dimension
            player_count: Number of players to balance for
            player_ids: Optional player ids to assign starting buildings to

        Returns:
            GeneratedMap; ``validation.valid`` is False only if every
            attempt failed
        """
        _check_inputs(game_id, size, player_count)
        base_seed = create_seed(game_id)
        started = time.perf_counter()

        logger.info(
            "Generating map",
            game_id=game_id,
            size=size,
            player_count=player_count,
            seed=base_seed,
        )

        result: Optional[AttemptResult] = None
        for attempt in range(self.max_attempts):
            seed = attempt_seed(base_seed, attempt)
            result = self.run_attempt(seed, size, player_count, attempt)
            if result.validation.valid:
                break
            logger.warning(
                "Map attempt rejected",
                game_id=game_id,
                attempt=attempt + 1,
                seed=seed,
                issues=result.validation.issues,
            )
        else:
            logger.error(
                "No valid map within attempt limit",
                game_id=game_id,
                attempts=self.max_attempts,
                issues=result.validation.issues,
            )

        starting_positions = {}
        if player_ids:
            starting_positions = assign_starting_positions(result.grid, list(player_ids), result.prng)

        elapsed = time.perf_counter() - started
        generated = GeneratedMap(
            game_id=game_id,
            grid=result.grid,
            size=size,
            player_count=player_count,
            seed=base_seed,
            attempt_seed=result.seed,
            attempts=result.attempt + 1,
            generated_at=datetime.now(timezone.utc),
            generation_time_seconds=round(elapsed, 4),
            validation=result.validation,
            starting_positions=starting_positions,
            player_ids=list(player_ids or []),
        )

        logger.info(
            "Map generated",
            game_id=game_id,
            seed=base_seed,
            attempt_seed=result.seed,
            attempts=generated.attempts,
            valid=generated.validation.valid,
            settlements=generated.validation.stats.settlements,
            strongholds=generated.validation.stats.strongholds,
            land_fraction=round(generated.validation.stats.land_fraction, 3),
        )
        return generated


def generate_map(
    game_id: str,
    size: int,
    player_count: int,
    player_ids: Optional[List[str]] = None,
    options: GenerationOptions = None,
    max_attempts: Optional[int] = None,
) -> GeneratedMap:
    """Convenience wrapper around ``MapGenerator.generate``."""
    return MapGenerator(options, max_attempts).generate(game_id, size, player_count, player_ids)
