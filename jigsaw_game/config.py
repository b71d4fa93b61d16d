from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings configuration."""

    # API settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Jigsaw Puzzle"

    # Upload settings
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB
    DEFAULT_IMAGE_PATH: Optional[Path] = None

    # CORS settings
    BACKEND_CORS_ORIGINS: list[str] = ["*"]

    LOG_LEVEL: str = "INFO"

    # Puzzle settings
    DEFAULT_GRID_SIZE: int = Field(default=5, ge=1)
    GRID_PRESETS: list[int] = [3, 5, 8]
    SNAP_THRESHOLD: float = Field(default=25.0, gt=0)
    # Tabs reach 0.25 of the longest piece side, so smaller buffers clip them
    BUFFER_RATIO: float = Field(default=0.45, ge=0.25)
    RANDOM_SEED: Optional[int] = None

    # Available board area, in board units
    BOARD_MAX_WIDTH: float = Field(default=960.0, gt=0, allow_inf_nan=False)
    BOARD_MAX_HEIGHT: float = Field(default=640.0, gt=0, allow_inf_nan=False)

    # Rendering settings
    POINTS_PER_CURVE: int = Field(default=20, ge=2)
    MASK_ANTIALIAS_SCALE: int = Field(default=4, ge=1)

    class Config:
        """Pydantic configuration class."""

        case_sensitive = True
        env_file = ".env"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
