# src/foundry/core/__init__.py
"""Core infrastructure: configuration, logging."""

from foundry.core.config import (
    FoundrySettings,
    ImportSettings,
    LoggingSettings,
    load_blueprint,
    load_settings,
)
from foundry.core.logging import (
    configure_logging,
    get_logger,
)

__all__ = [
    "FoundrySettings",
    "ImportSettings",
    "LoggingSettings",
    "configure_logging",
    "get_logger",
    "load_blueprint",
    "load_settings",
]
