"""
FleetDash - Terminal dashboard for polling metrics across a fleet of hosts.

Hosts come from a nested group/children YAML inventory and are reached
locally or over SSH.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("fleetdash")
except PackageNotFoundError:
    # Package not installed, fallback to pyproject.toml
    __version__ = "0.1.0"

__author__ = "FleetDash Contributors"
