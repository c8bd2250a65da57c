"""
Analytics Configuration

YAML-backed settings for ratings and simulations. Missing files fall back
to the built-in defaults.
"""

from pathlib import Path
from typing import Any

import yaml
from loguru import logger
from pydantic import BaseModel, Field

DEFAULT_CONFIG_PATH = Path("config/analytics.yaml")


class RatingSettings(BaseModel):
    """Rating trend and Elo parameters."""

    initial_rating: float = 1500
    k_factor: float = Field(default=32, gt=0)
    rating_floor: float = 1000
    baseline_match_score: float = 50
    momentum_window: int = Field(default=5, ge=0)


class SimulationSettings(BaseModel):
    """Monte Carlo parameters."""

    default_iterations: int = Field(default=10000, ge=1, le=1_000_000)
    scenario_iterations: int = Field(default=5000, ge=1, le=1_000_000)
    max_combinations: int = Field(default=500, ge=1)
    random_seed: int | None = None


class AnalyticsConfig(BaseModel):
    """Top-level analytics configuration."""

    ratings: RatingSettings = Field(default_factory=RatingSettings)
    simulation: SimulationSettings = Field(default_factory=SimulationSettings)


def load_config(config_path: str | Path | None = None) -> AnalyticsConfig:
    """
    Load analytics configuration from YAML.

    Args:
        config_path: Path to the config file. Defaults to config/analytics.yaml

    Returns:
        Validated AnalyticsConfig
    """
    config_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        logger.warning(f"Analytics config not found at {config_path}, using defaults")
        return AnalyticsConfig()

    with open(config_path) as f:
        raw: dict[str, Any] = yaml.safe_load(f) or {}

    logger.debug(f"Loaded analytics config from {config_path}")
    return AnalyticsConfig.model_validate(raw)
