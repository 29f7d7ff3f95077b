"""Application configuration using Pydantic settings."""

import os
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Package directory (labyrinth/)
BASE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR.parent, ".env"),
        env_file_encoding="utf-8",
        env_prefix="LABYRINTH_",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Labyrinth Trail"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # CORS - comma-separated list of allowed origins
    cors_origins: str = "http://localhost:3000,http://localhost:8080,http://127.0.0.1:5500"

    # Rate limiting
    rate_limit_solves: int = 20  # solves per minute

    # Mazes
    mazes_dir: Path = BASE_DIR / "mazes"
    max_grid_size: int = 256  # cells along either side of a submitted grid

    # Play sessions are dropped after this long without a look or move
    session_ttl_seconds: float = 3600.0

    # Solver
    ledger_initial_span: int = 2
    move_timeout_seconds: float = 5.0
    animation_delay_seconds: float = 0.0

    # API URL used by the remote environment
    api_url: str = "http://localhost:8000/v1"

    @field_validator("ledger_initial_span")
    @classmethod
    def validate_ledger_initial_span(cls, v: int) -> int:
        """Ledger spans double on growth, so start from a power of two."""
        if v < 1 or v & (v - 1):
            raise ValueError("LEDGER_INITIAL_SPAN must be a power of two")
        return v

    @field_validator("move_timeout_seconds", "animation_delay_seconds", "session_ttl_seconds")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        """Reject negative durations."""
        if v < 0:
            raise ValueError("Durations must not be negative")
        return v

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        if self.debug:
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
