"""Configuration loading and validation."""

from gapply.config.loader import load_config
from gapply.config.schema import ApplyConfig, Config, LoggingConfig

__all__ = [
    "ApplyConfig",
    "Config",
    "LoggingConfig",
    "load_config",
]
