"""
FleetDash Config - Configuration management.
"""

from fleetdash.config.models import DEFAULT_SSH_PORT, ConnectionSpec
from fleetdash.config.settings import AppSettings
from fleetdash.config.loader import (
    DEFAULT_TITLE,
    MIN_POLL_INTERVAL,
    DashboardConfig,
    load_config,
    parse_document,
)

__all__ = [
    "DEFAULT_SSH_PORT",
    "DEFAULT_TITLE",
    "MIN_POLL_INTERVAL",
    "AppSettings",
    "ConnectionSpec",
    "DashboardConfig",
    "load_config",
    "parse_document",
]
