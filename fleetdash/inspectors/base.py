"""
FleetDash Inspectors - Metric sampling contract.

An inspector knows which command samples a metric and how to parse its
output. The driver decides where the command runs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from fleetdash.drivers.base import Driver


class Inspector(ABC):
    """Sample one metric through a driver."""

    name: ClassVar[str]
    default_command: ClassVar[str | None] = None
    description: ClassVar[str] = ""

    def __init__(self, command: str | None = None) -> None:
        """
        Initialize inspector.

        Args:
            command: Custom command replacing the default one.
        """
        resolved = command or self.default_command
        if not resolved:
            raise ValueError(f"Metric '{self.name}' needs a command")
        self.command = resolved

    @classmethod
    def requires_command(cls) -> bool:
        return cls.default_command is None

    @abstractmethod
    def parse(self, output: str) -> Any:
        """
        Parse command output.

        Raises:
            InspectorParseError: If the output is not understood.
        """

    def summarize(self, value: Any) -> str:
        """Short text for a table cell."""
        return str(value)

    def details(self, value: Any) -> list[tuple[str, str]]:
        """Label/value rows for the detail view."""
        return [(self.name, self.summarize(value))]

    async def sample(self, driver: Driver, timeout: float) -> Any:
        """Run the command on the driver and parse the result."""
        output = await driver.run(self.command, timeout)
        return self.parse(output)
