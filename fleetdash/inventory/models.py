"""
FleetDash Inventory - Resolved inventory records.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from fleetdash.config.models import ConnectionSpec


@dataclass(frozen=True)
class Host:
    """A resolved host, read-only for the life of the process."""

    address: str
    connection: ConnectionSpec
    alias: str = ""

    def __post_init__(self) -> None:
        if not self.address:
            raise ValueError("Host address is required")

    @property
    def label(self) -> str:
        """Alias for display, `None` when unset."""
        return self.alias or "None"


@dataclass(frozen=True)
class DashboardInfo:
    """Everything the dashboard and the polling engine need."""

    hosts: tuple[Host, ...]
    metrics: dict[str, str | None] = field(default_factory=dict)
    title: str = "Fleet Dashboard"
    poll_interval: int = 10

    def addresses(self) -> list[str]:
        """All host addresses in inventory order."""
        return [host.address for host in self.hosts]

    def get_host(self, address: str) -> Host | None:
        for host in self.hosts:
            if host.address == address:
                return host
        return None
