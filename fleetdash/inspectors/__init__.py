"""
FleetDash Inspectors - Metric commands and output parsing.
"""

from fleetdash.inspectors.base import Inspector
from fleetdash.inspectors.builtin import (
    BUILTIN_INSPECTORS,
    CustomInspector,
    DiskInspector,
    LoadAvgInspector,
    MemoryInspector,
    UptimeInspector,
)
from fleetdash.inspectors.registry import InspectorSamplers, MetricRegistry, Sampler

__all__ = [
    "BUILTIN_INSPECTORS",
    "CustomInspector",
    "DiskInspector",
    "Inspector",
    "InspectorSamplers",
    "LoadAvgInspector",
    "MemoryInspector",
    "MetricRegistry",
    "Sampler",
    "UptimeInspector",
]
