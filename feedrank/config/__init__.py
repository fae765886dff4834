"""Configuration management for the ranking engine."""

from .loader import CONFIG_ENV_VAR, Config, default_config_path, load_config, save_config
from .models import (
    AnonymousOrder,
    ConfigModel,
    FeedConfig,
    GeoPolicy,
    HistorySignal,
    MealBand,
    RankingConfig,
    SafetyConfig,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "AnonymousOrder",
    "Config",
    "ConfigModel",
    "FeedConfig",
    "GeoPolicy",
    "HistorySignal",
    "MealBand",
    "RankingConfig",
    "SafetyConfig",
    "default_config_path",
    "load_config",
    "save_config",
]
