"""
core/config.py
Environment-based configuration using pydantic-settings.
Loads from .env file automatically; every key has a safe default.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Engine settings loaded from environment variables / .env file."""

    # --- Market maker (LMSR) ---
    LMSR_DEFAULT_LIQUIDITY: float = 100.0
    LMSR_STRICT_LIQUIDITY: bool = False
    LMSR_BISECTION_MAX_ITERATIONS: int = 100
    LMSR_BISECTION_TOLERANCE: float = 1e-4
    LMSR_UPPER_BOUND_MULTIPLIER: float = 10.0
    LMSR_MAX_BRACKET_DOUBLINGS: int = 64

    # --- Swarm consensus ---
    SWARM_TOP_PREDICTORS: int = 10

    # --- Leaderboard ---
    LEADERBOARD_PAGE_SIZE: int = 50
    LEADERBOARD_MAX_PAGE_SIZE: int = 100

    # --- Logging ---
    LOG_LEVEL: str = "INFO"

    model_config = {
        "env_file": ".env",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Singleton access to engine settings."""
    return Settings()
