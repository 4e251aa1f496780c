"""Configuration module."""

from shelfwise.config.logging import bind_log_context, configure_logging, get_logger
from shelfwise.config.settings import (
    InventorySettings,
    ReconciliationThresholds,
    Settings,
    get_settings,
    reset_settings,
)

__all__ = [
    "InventorySettings",
    "ReconciliationThresholds",
    "Settings",
    "get_settings",
    "reset_settings",
    "bind_log_context",
    "configure_logging",
    "get_logger",
]
