"""
FleetDash UI - Shared dashboard state.

Written by input callbacks, read by the render loop. Every access goes
through one lock and readers get an immutable snapshot.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence
from dataclasses import dataclass

from fleetdash.core.types import ViewMode
from fleetdash.ui import pager


@dataclass(frozen=True)
class UISnapshot:
    page_index: int
    page_count: int
    view: ViewMode
    selected_host: str | None
    selected_metric: str | None


class UIState:
    """Current page, selected host and metric, and body layout."""

    def __init__(self, page_count: int, metrics: Sequence[str]) -> None:
        if page_count < 0:
            raise ValueError(f"page_count must be >= 0, got: {page_count}")
        self._lock = threading.Lock()
        self._page_count = page_count
        self._page_index = 0
        self._metrics = list(metrics)
        self._view = ViewMode.OVERVIEW
        self._selected_host: str | None = None
        self._selected_metric: str | None = self._metrics[0] if self._metrics else None

    def snapshot(self) -> UISnapshot:
        with self._lock:
            return UISnapshot(
                page_index=self._page_index,
                page_count=self._page_count,
                view=self._view,
                selected_host=self._selected_host,
                selected_metric=self._selected_metric,
            )

    @property
    def page_index(self) -> int:
        with self._lock:
            return self._page_index

    def next_page(self) -> int:
        """Move to the next page (wraps). Returns the new index."""
        with self._lock:
            if self._page_count:
                self._page_index = pager.next_page(self._page_index, self._page_count)
                self._view = ViewMode.OVERVIEW
            return self._page_index

    def prev_page(self) -> int:
        """Move to the previous page (wraps). Returns the new index."""
        with self._lock:
            if self._page_count:
                self._page_index = pager.prev_page(self._page_index, self._page_count)
                self._view = ViewMode.OVERVIEW
            return self._page_index

    def select(self, address: str, metric: str | None = None) -> None:
        """Show the detail view of a host, optionally switching metric."""
        with self._lock:
            if metric is not None:
                if metric not in self._metrics:
                    raise ValueError(f"Unknown metric: {metric}")
                self._selected_metric = metric
            self._selected_host = address
            self._view = ViewMode.DETAIL

    def cycle_metric(self) -> str | None:
        """Select the next configured metric. Returns it."""
        with self._lock:
            if not self._metrics:
                return None
            if self._selected_metric in self._metrics:
                position = self._metrics.index(self._selected_metric)
                self._selected_metric = self._metrics[(position + 1) % len(self._metrics)]
            else:
                self._selected_metric = self._metrics[0]
            return self._selected_metric

    def back(self) -> None:
        """Return to the host overview."""
        with self._lock:
            self._view = ViewMode.OVERVIEW
