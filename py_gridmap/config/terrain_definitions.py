"""
Terrain definitions for every terrain kind the generator can produce.

Display name, colour and symbol are consumed by the renderer; movement costs
and gold income are consumed by the rules layer. A movement cost of -1 marks
the terrain as impassable for that movement class.
"""

from enum import Enum
from typing import Dict

from pydantic import BaseModel, Field

from ..core.grid import Terrain


class MovementType(str, Enum):
    """Movement classes used by unit catalogs."""

    GROUND = "ground"
    FLYING = "flying"
    AMPHIBIOUS = "amphibious"


IMPASSABLE = -1


class TerrainDefinition(BaseModel):
    """Static properties of a terrain kind."""

    terrain: Terrain = Field(description="Terrain kind")
    name: str = Field(description="Display name")
    color: str = Field(description="Hex colour used by the renderer")
    symbol: str = Field(description="Single glyph used by text renderers")
    movement_cost: Dict[MovementType, int] = Field(
        description="Movement points per movement class, -1 = impassable"
    )
    gold_income: int = Field(default=0, description="Gold produced per turn")
    is_building: bool = Field(default=False, description="Whether this is a building")


TERRAIN_DEFINITIONS: Dict[Terrain, TerrainDefinition] = {
    Terrain.PLAINS: TerrainDefinition(
        terrain=Terrain.PLAINS,
        name="Plains",
        color="#27ae60",
        symbol=".",
        movement_cost={MovementType.GROUND: 1, MovementType.FLYING: 1, MovementType.AMPHIBIOUS: 1},
    ),
    Terrain.FOREST: TerrainDefinition(
        terrain=Terrain.FOREST,
        name="Forest",
        color="#229954",
        symbol="f",
        movement_cost={MovementType.GROUND: 2, MovementType.FLYING: 1, MovementType.AMPHIBIOUS: 2},
    ),
    Terrain.MOUNTAIN: TerrainDefinition(
        terrain=Terrain.MOUNTAIN,
        name="Mountain",
        color="#95a5a6",
        symbol="^",
        movement_cost={MovementType.GROUND: 3, MovementType.FLYING: 1, MovementType.AMPHIBIOUS: 4},
    ),
    Terrain.WATER: TerrainDefinition(
        terrain=Terrain.WATER,
        name="Water",
        color="#3498db",
        symbol="~",
        movement_cost={
            MovementType.GROUND: IMPASSABLE,
            MovementType.FLYING: 1,
            MovementType.AMPHIBIOUS: 1,
        },
    ),
    Terrain.SWAMP: TerrainDefinition(
        terrain=Terrain.SWAMP,
        name="Swamp",
        color="#8b4513",
        symbol="s",
        movement_cost={MovementType.GROUND: 2, MovementType.FLYING: 1, MovementType.AMPHIBIOUS: 1},
    ),
    Terrain.SETTLEMENT: TerrainDefinition(
        terrain=Terrain.SETTLEMENT,
        name="Settlement",
        color="#e67e22",
        symbol="S",
        movement_cost={MovementType.GROUND: 1, MovementType.FLYING: 1, MovementType.AMPHIBIOUS: 1},
        gold_income=2,
        is_building=True,
    ),
    Terrain.STRONGHOLD: TerrainDefinition(
        terrain=Terrain.STRONGHOLD,
        name="Stronghold",
        color="#9b59b6",
        symbol="C",
        movement_cost={MovementType.GROUND: 1, MovementType.FLYING: 1, MovementType.AMPHIBIOUS: 1},
        gold_income=5,
        is_building=True,
    ),
}


def get_definition(terrain: Terrain) -> TerrainDefinition:
    """Get the definition for a terrain kind."""
    return TERRAIN_DEFINITIONS[Terrain(terrain)]


def movement_cost(terrain: Terrain, movement: MovementType = MovementType.GROUND) -> int:
    """Movement points needed to enter a tile, -1 if impassable."""
    return get_definition(terrain).movement_cost[MovementType(movement)]


def is_passable(terrain: Terrain, movement: MovementType = MovementType.GROUND) -> bool:
    return movement_cost(terrain, movement) != IMPASSABLE
