"""
FleetDash Core - Errors, logging and shared types.
"""

from fleetdash.core.exceptions import (
    CommandFailedError,
    CommandTimeoutError,
    ConfigError,
    ConnectionDecodeError,
    EngineShutdownError,
    ExecutionError,
    FleetDashError,
    InspectorParseError,
    InventoryError,
    PollError,
    SSHConnectionError,
)
from fleetdash.core.logging import configure_logging
from fleetdash.core.types import ConnectionType, SampleStatus, ViewMode

__all__ = [
    "CommandFailedError",
    "CommandTimeoutError",
    "ConfigError",
    "ConnectionDecodeError",
    "ConnectionType",
    "EngineShutdownError",
    "ExecutionError",
    "FleetDashError",
    "InspectorParseError",
    "InventoryError",
    "PollError",
    "SSHConnectionError",
    "SampleStatus",
    "ViewMode",
    "configure_logging",
]
