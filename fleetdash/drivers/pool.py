"""
FleetDash Drivers - Per-host driver pool.

One driver per host address, shared by all metrics of that host.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from fleetdash.drivers.base import Driver
    from fleetdash.inventory.models import Host


class DriverPool:
    """Create drivers on demand and close them together."""

    def __init__(self, connect_timeout: float | None = None) -> None:
        self.connect_timeout = connect_timeout
        self._drivers: dict[str, Driver] = {}

    def __len__(self) -> int:
        return len(self._drivers)

    def __contains__(self, address: object) -> bool:
        return address in self._drivers

    def get(self, host: Host) -> Driver:
        """Get or create the driver of `host`."""
        driver = self._drivers.get(host.address)
        if driver is None:
            driver = host.connection.to_driver(self.connect_timeout)
            self._drivers[host.address] = driver
        return driver

    async def close_all(self) -> None:
        """Close every driver. Failures are logged, not raised."""
        drivers = list(self._drivers.values())
        self._drivers.clear()
        for driver in drivers:
            try:
                await driver.close()
            except Exception as e:
                logger.warning(f"⚠️ Failed to close driver for {driver.host}: {e}")
        if drivers:
            logger.debug(f"🔌 Closed {len(drivers)} driver(s)")
