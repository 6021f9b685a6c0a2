"""
FleetDash Polling - Per (host, metric) result slots.

A slot holds one immutable Sample. Writers swap it under a lock so a
reader always sees a complete snapshot, either the previous one or the
new one.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Any

from fleetdash.core.exceptions import PollError
from fleetdash.core.types import SampleStatus


@dataclass(frozen=True)
class Sample:
    """Snapshot of a result slot."""

    status: SampleStatus = SampleStatus.PENDING
    value: Any = None
    error: str | None = None
    updated_at: datetime | None = None
    attempted_at: datetime | None = None
    consecutive_failures: int = 0

    @property
    def stale(self) -> bool:
        """Last attempt failed but an older value is still shown."""
        return self.status == SampleStatus.ERROR and self.updated_at is not None


class ResultSlot:
    """Latest sample of one (host, metric) pair."""

    def __init__(self, address: str, metric: str) -> None:
        self.address = address
        self.metric = metric
        self._sample = Sample()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def key(self) -> tuple[str, str]:
        return (self.address, self.metric)

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def read(self) -> Sample:
        with self._lock:
            return self._sample

    def record_success(self, value: Any, at: datetime | None = None) -> bool:
        """
        Publish a new value.

        Returns:
            False if the slot is closed and the write was dropped.
        """
        now = at or datetime.now(UTC)
        with self._lock:
            if self._closed:
                return False
            self._sample = Sample(
                status=SampleStatus.OK,
                value=value,
                updated_at=now,
                attempted_at=now,
            )
            return True

    def record_failure(self, error: PollError, at: datetime | None = None) -> bool:
        """
        Record a failed attempt, keeping the last good value.

        Returns:
            False if the slot is closed and the write was dropped.
        """
        now = at or datetime.now(UTC)
        with self._lock:
            if self._closed:
                return False
            previous = self._sample
            self._sample = replace(
                previous,
                status=SampleStatus.ERROR,
                error=error.reason,
                attempted_at=now,
                consecutive_failures=previous.consecutive_failures + 1,
            )
            return True

    def close(self) -> None:
        """Refuse any further write."""
        with self._lock:
            self._closed = True
