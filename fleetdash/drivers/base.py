"""
FleetDash Drivers - Execution capability.

A driver runs a shell command against one host and returns its stdout.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class Driver(ABC):
    """Run commands on a host."""

    @property
    @abstractmethod
    def host(self) -> str:
        """Host this driver targets, for messages."""

    @property
    @abstractmethod
    def kind(self) -> str:
        """Driver type shown on the dashboard."""

    @abstractmethod
    async def run(self, command: str, timeout: float) -> str:
        """
        Execute a command.

        Args:
            command: Shell command line.
            timeout: Deadline in seconds for the whole call.

        Returns:
            Standard output of the command.

        Raises:
            CommandTimeoutError: If the deadline expires.
            CommandFailedError: If the command exits non-zero.
            SSHConnectionError: If the remote host cannot be reached.
        """

    async def close(self) -> None:
        """Release any held connection."""
        return None
