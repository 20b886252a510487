"""FastAPI main application."""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
import logging
import structlog

from ..config import settings, TERRAIN_DEFINITIONS
from ..core.map_generator import GeneratedMap
from ..core.map_store import MapStore
from ..core.validation import ValidationReport

# Configure logging
logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Grid Map Generator API",
    description="Deterministic terrain grids for grid-based strategy games",
    version="0.1.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Authoritative copy of every game's map
store = MapStore()


# Request/Response models
class MapGenerationRequest(BaseModel):
    """Request to generate the map for a game."""

    game_id: str = Field(..., min_length=1, description="Game identifier, seeds the map")
    size: int = Field(
        settings.default_map_size,
        ge=settings.min_map_size,
        le=settings.max_map_size,
        description="Grid dimension",
    )
    player_count: int = Field(
        settings.min_players,
        ge=settings.min_players,
        le=settings.max_players,
        description="Number of players",
    )
    player_ids: Optional[List[str]] = Field(None, description="Players to assign starting buildings to")
    regenerate: bool = Field(False, description="Replace a stored map for this game")


class MapSummary(BaseModel):
    """Summary information about a generated map."""

    game_id: str
    size: int
    player_count: int
    seed: int
    attempt_seed: int
    attempts: int
    valid: bool
    generated_at: str
    generation_time_seconds: float


class TerrainInfo(BaseModel):
    """Terrain definition as served to clients."""

    id: str
    name: str
    color: str
    symbol: str
    movement_cost: Dict[str, int]
    gold_income: int
    is_building: bool


def _summary(generated: GeneratedMap) -> MapSummary:
    return MapSummary(
        game_id=generated.game_id,
        size=generated.size,
        player_count=generated.player_count,
        seed=generated.seed,
        attempt_seed=generated.attempt_seed,
        attempts=generated.attempts,
        valid=generated.validation.valid,
        generated_at=generated.generated_at.isoformat(),
        generation_time_seconds=generated.generation_time_seconds,
    )


def get_map_or_404(game_id: str) -> GeneratedMap:
    generated = store.get(game_id)
    if generated is None:
        raise HTTPException(status_code=404, detail="Map not found")
    return generated


# Event handlers
@app.on_event("startup")
async def startup_event():
    logger.info("Starting Grid Map Generator API")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Grid Map Generator API", stored_maps=len(store))


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Grid Map Generator API",
        "version": "0.1.0",
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "stored_maps": len(store)}


@app.get("/terrain", response_model=List[TerrainInfo])
async def list_terrain():
    """List terrain definitions for renderers and rules."""
    return [
        TerrainInfo(
            id=definition.terrain.label,
            name=definition.name,
            color=definition.color,
            symbol=definition.symbol,
            movement_cost={m.value: cost for m, cost in definition.movement_cost.items()},
            gold_income=definition.gold_income,
            is_building=definition.is_building,
        )
        for definition in TERRAIN_DEFINITIONS.values()
    ]


@app.post("/maps/generate")
def generate_map(request: MapGenerationRequest) -> Dict[str, Any]:
    """
    Generate (or fetch) the map for a game.

    Generation is deterministic per game id, so repeated requests return
    the same map unless ``regenerate`` is set after a parameter change.
    """
    logger.info("Map generation requested", request=request.model_dump())

    if request.regenerate:
        store.remove(request.game_id)

    try:
        generated = store.get_or_generate(
            request.game_id,
            request.size,
            request.player_count,
            request.player_ids,
        )
    except ValueError as e:
        logger.warning("Rejected map generation request", error=str(e))
        raise HTTPException(status_code=422, detail=str(e))

    return generated.to_dict()


@app.get("/maps", response_model=List[MapSummary])
async def list_maps():
    """List all stored maps."""
    return [_summary(generated) for generated in store]


@app.get("/maps/{game_id}")
async def get_map(game_id: str, include_grid: bool = True) -> Dict[str, Any]:
    """Get the stored map for a game."""
    return get_map_or_404(game_id).to_dict(include_grid=include_grid)


@app.get("/maps/{game_id}/validation", response_model=ValidationReport)
async def get_map_validation(game_id: str):
    """Get the validation report of a stored map."""
    return get_map_or_404(game_id).validation


@app.delete("/maps/{game_id}")
async def delete_map(game_id: str):
    """Drop the stored map for a game."""
    if not store.remove(game_id):
        raise HTTPException(status_code=404, detail="Map not found")
    logger.info("Map deleted", game_id=game_id)
    return {"game_id": game_id, "deleted": True}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
