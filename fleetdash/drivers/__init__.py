"""
FleetDash Drivers - Local and SSH command execution.
"""

from fleetdash.drivers.base import Driver
from fleetdash.drivers.local import LocalDriver
from fleetdash.drivers.pool import DriverPool
from fleetdash.drivers.ssh import SSHDriver

__all__ = ["Driver", "DriverPool", "LocalDriver", "SSHDriver"]
