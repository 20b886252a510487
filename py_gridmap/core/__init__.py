"""
Core map generation functionality.
"""

from .grid import Grid, Terrain, Tile, BUILDING_TERRAINS
from .lcg_prng import LcgPRNG, attempt_seed, create_seed
from .terrain import TerrainOptions, TerrainSynthesizer
from .buildings import BuildingOptions, BuildingPlacement, BuildingPlacer, PlacementResult
from .smoothing import SmoothingOptions, smooth_terrain
from .connectivity import ConnectivityOptions, ConnectivityReport, label_landmasses, repair_connectivity
from .validation import MapStats, ValidationReport, ValidationThresholds, validate_map
from .map_generator import GeneratedMap, GenerationOptions, MapGenerator, generate_map
from .map_store import MapStore

__all__ = ['Grid', 'Terrain', 'Tile', 'BUILDING_TERRAINS',
           'LcgPRNG', 'attempt_seed', 'create_seed',
           'TerrainOptions', 'TerrainSynthesizer',
           'BuildingOptions', 'BuildingPlacement', 'BuildingPlacer', 'PlacementResult',
           'SmoothingOptions', 'smooth_terrain',
           'ConnectivityOptions', 'ConnectivityReport', 'label_landmasses', 'repair_connectivity',
           'MapStats', 'ValidationReport', 'ValidationThresholds', 'validate_map',
           'GeneratedMap', 'GenerationOptions', 'MapGenerator', 'generate_map',
           'MapStore']
