"""
FleetDash Polling - Periodic per-pair sampling with failure isolation.
"""

from fleetdash.polling.engine import PollHandle, PollingEngine, SamplerFactory
from fleetdash.polling.slot import ResultSlot, Sample

__all__ = ["PollHandle", "PollingEngine", "ResultSlot", "Sample", "SamplerFactory"]
