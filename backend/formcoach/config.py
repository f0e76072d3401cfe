"""Application configuration."""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Form Coach"
    debug: bool = False
    api_prefix: str = "/api"
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Exercise selection
    default_exercise: str = "squat"  # Used when a client sends an unknown name

    # Keypoint smoothing
    smoothing_strategy: str = "window"  # "window", "ema" or "savgol"
    smoothing_window: int = 5
    smoothing_alpha: float = 0.3  # EMA factor, clamped to [0.1, 0.9]
    savgol_window: int = 7
    savgol_poly_order: int = 2

    # Analysis
    stability_window: int = 30  # Frames averaged into the stability score

    # Coaching feedback
    voice_language: str = "en"  # "en" or "ar"
    prompt_cooldown_seconds: float = 3.0  # Minimum gap before repeating a prompt

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
