"""
Engine configuration using Pydantic Settings.

Every component accepts explicit parameters; these settings are the defaults
used when a caller does not pass one.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===========================================
    # Environment
    # ===========================================
    ENVIRONMENT: Literal["local", "test", "production"] = "local"
    DEBUG: bool = False

    # ===========================================
    # Logging
    # ===========================================
    LOG_LEVEL: str = "INFO"
    # None = auto-detect (JSON when stderr is not a TTY)
    LOG_JSON: Optional[bool] = None

    # ===========================================
    # Grid / Layout
    # ===========================================
    DEFAULT_CELL_WIDTH: float = Field(40.0, gt=0)
    MAX_LANES: int = Field(10, ge=1)
    LANE_HEIGHT: int = Field(40, ge=1)
    TRACK_PADDING: int = Field(20, ge=0)
    MIN_TRACK_HEIGHT: int = Field(50, ge=1)

    # ===========================================
    # Pointer interaction
    # ===========================================
    DRAG_THRESHOLD_PX: float = Field(4.0, ge=0)
    RESIZE_EDGE_PX: float = Field(8.0, ge=0)

    # ===========================================
    # Auto-scroll
    # ===========================================
    AUTO_SCROLL_EDGE_PX: float = Field(80.0, gt=0)
    AUTO_SCROLL_MAX_SPEED: float = Field(20.0, ge=0)
    AUTO_SCROLL_INTERVAL_SECONDS: float = Field(1 / 60, gt=0)

    # ===========================================
    # Validation
    # ===========================================
    FREE_SLOT_MAX_ATTEMPTS: int = Field(365, ge=1)
    # Move the drop candidate to the nearest free slot instead of rejecting it
    SNAP_TO_FREE_SLOT: bool = False

    @property
    def is_test(self) -> bool:
        """Check if running under tests."""
        return self.ENVIRONMENT == "test"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded only once.
    """
    return Settings()
