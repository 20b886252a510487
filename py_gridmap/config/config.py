from pathlib import Path
from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings

import os

# Explicitly load .env for local/dev environments only if values are missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (e.g., plain, json)")

    # Map Generation Configuration
    default_map_size: int = Field(default=30, description="Default grid dimension")
    min_map_size: int = Field(default=20, description="Min allowed grid dimension")
    max_map_size: int = Field(default=100, description="Max allowed grid dimension")
    min_players: int = Field(default=2, description="Min players per game")
    max_players: int = Field(default=8, description="Max players per game")
    max_generation_attempts: int = Field(
        default=10, description="Regeneration attempts before giving up on validation"
    )

    class Config:
        env_prefix = "GRIDMAP_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Instantiate singleton settings object
settings = Settings()
