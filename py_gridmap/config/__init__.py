"""
Configuration modules for map generation.
"""

from .config import Settings, settings
from .terrain_definitions import (
    TERRAIN_DEFINITIONS,
    MovementType,
    TerrainDefinition,
    get_definition,
    is_passable,
    movement_cost,
)

__all__ = [
    'Settings', 'settings', 'TERRAIN_DEFINITIONS', 'MovementType',
    'TerrainDefinition', 'get_definition', 'is_passable', 'movement_cost',
]
