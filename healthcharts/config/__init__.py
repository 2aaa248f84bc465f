"""Configuration helpers."""
from __future__ import annotations

from .settings import (
    ConfigurationError,
    DistributionConfig,
    LoggingConfig,
    NormalizationConfig,
    Settings,
    SmoothingConfig,
    load_settings,
    setup_logging,
)

__all__ = [
    "ConfigurationError",
    "DistributionConfig",
    "LoggingConfig",
    "NormalizationConfig",
    "Settings",
    "SmoothingConfig",
    "load_settings",
    "setup_logging",
]
