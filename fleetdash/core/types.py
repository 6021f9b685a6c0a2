"""
FleetDash Core - Shared types and enums.
"""

from __future__ import annotations

from enum import StrEnum


class ConnectionType(StrEnum):
    """How a host is reached."""

    LOCAL = "local"
    SSH = "ssh"


class SampleStatus(StrEnum):
    """State of a (host, metric) result cell."""

    PENDING = "pending"  # No attempt finished yet
    OK = "ok"
    ERROR = "error"  # Last attempt failed, value (if any) is stale


class ViewMode(StrEnum):
    """Dashboard body layout."""

    OVERVIEW = "overview"
    DETAIL = "detail"
