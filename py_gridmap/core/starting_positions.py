"""
Starting position assignment.

Gives every player one building to start from. Candidate buildings are the
strongholds followed by the settlements in row-major order, shuffled with
the generation stream so the assignment is reproducible from the game id.
"""

from typing import Dict, List, Sequence, Tuple

import structlog

from ..utils.random import shuffle
from .buildings import building_positions
from .grid import Grid
from .lcg_prng import LcgPRNG

logger = structlog.get_logger()


def assign_starting_positions(
    grid: Grid,
    player_ids: Sequence[str],
    prng: LcgPRNG,
) -> Dict[str, Tuple[int, int]]:
    """
    Assign each player an owned building.

    Sets the ``owner`` of the chosen building tiles. Players beyond the
    number of available buildings get no starting position.

    Returns:
        Mapping of player id to ``(x, y)`` of their building
    """
    if not player_ids:
        return {}

    candidates: List[Tuple[int, int]] = [(x, y) for x, y, _ in building_positions(grid)]
    if len(candidates) < len(player_ids):
        logger.warning(
            "Not enough buildings for all players",
            buildings=len(candidates),
            players=len(player_ids),
        )

    shuffle(prng, candidates)

    positions: Dict[str, Tuple[int, int]] = {}
    for player_id, (x, y) in zip(player_ids, candidates):
        grid.owners[y, x] = player_id
        positions[player_id] = (x, y)

    logger.debug("Starting positions assigned", players=len(positions))
    return positions
