"""
FleetDash Inspectors - Metric registry.

Validates metric names at load time and binds inspectors to host drivers
for the polling engine.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING, Any

from fleetdash.inspectors.base import Inspector
from fleetdash.inspectors.builtin import BUILTIN_INSPECTORS

if TYPE_CHECKING:
    from fleetdash.drivers.pool import DriverPool
    from fleetdash.inventory.models import Host

Sampler = Callable[[float], Awaitable[Any]]


class MetricRegistry:
    """Known metrics by name."""

    def __init__(self, inspectors: tuple[type[Inspector], ...] = BUILTIN_INSPECTORS) -> None:
        self._inspectors: dict[str, type[Inspector]] = {}
        for inspector in inspectors:
            self.register(inspector)

    def register(self, inspector: type[Inspector]) -> None:
        """Add or replace an inspector class."""
        self._inspectors[inspector.name] = inspector

    def valid(self, name: str) -> bool:
        return name in self._inspectors

    def names(self) -> list[str]:
        return sorted(self._inspectors)

    def requires_command(self, name: str) -> bool:
        return self._inspectors[name].requires_command()

    def create(self, name: str, command: str | None = None) -> Inspector:
        """
        Instantiate the inspector of a metric.

        Raises:
            KeyError: If the metric is unknown.
        """
        return self._inspectors[name](command)


class InspectorSamplers:
    """
    Sampler factory for the polling engine.

    One inspector per configured metric, one driver per host.
    """

    def __init__(
        self,
        registry: MetricRegistry,
        metrics: Mapping[str, str | None],
        pool: DriverPool,
    ) -> None:
        self.inspectors = {
            name: registry.create(name, command) for name, command in metrics.items()
        }
        self.pool = pool

    def __call__(self, host: Host, metric: str) -> Sampler:
        inspector = self.inspectors[metric]
        driver = self.pool.get(host)

        async def sample(timeout: float) -> Any:
            return await inspector.sample(driver, timeout)

        return sample

    def summarize(self, metric: str, value: Any) -> str:
        return self.inspectors[metric].summarize(value)

    def details(self, metric: str, value: Any) -> list[tuple[str, str]]:
        return self.inspectors[metric].details(value)
