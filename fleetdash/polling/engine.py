"""
FleetDash Polling - Concurrent polling engine.

One asyncio task per (host, metric) pair samples at a fixed interval and
publishes into its ResultSlot. A failing sample is recorded on that slot
only and retried on the next tick, forever, without backoff. A single
stop event ends every task.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from loguru import logger

from fleetdash.core.exceptions import CommandTimeoutError, EngineShutdownError, PollError
from fleetdash.polling.slot import ResultSlot, Sample

if TYPE_CHECKING:
    from fleetdash.inspectors.registry import Sampler
    from fleetdash.inventory.models import Host

SamplerFactory = Callable[["Host", str], "Sampler"]

PairKey = tuple[str, str]


@dataclass
class PollHandle:
    """Running polling session."""

    interval: float
    timeout: float
    slots: dict[PairKey, ResultSlot] = field(default_factory=dict)
    tasks: dict[PairKey, asyncio.Task] = field(default_factory=dict)
    stop_event: asyncio.Event = field(default_factory=asyncio.Event)

    @property
    def running(self) -> bool:
        return not self.stop_event.is_set()

    @property
    def keys(self) -> list[PairKey]:
        return list(self.slots)

    def slot(self, address: str, metric: str) -> ResultSlot:
        return self.slots[(address, metric)]

    def sample(self, address: str, metric: str) -> Sample:
        """Latest sample of a pair, safe to call from any thread."""
        return self.slot(address, metric).read()

    def snapshot(self) -> dict[PairKey, Sample]:
        return {key: slot.read() for key, slot in self.slots.items()}


class PollingEngine:
    """
    Start and stop polling sessions.

    Tasks are unbounded: hosts x metrics tasks run concurrently, which is
    fine for dashboard-sized fleets.
    """

    DEFAULT_SHUTDOWN_GRACE = 5.0

    def start(
        self,
        hosts: Sequence[Host],
        metrics: Iterable[str],
        sampler_for: SamplerFactory,
        interval: float,
        timeout: float | None = None,
    ) -> PollHandle:
        """
        Spawn one periodic task per (host, metric).

        Must be called from a running event loop. The first sample of every
        pair is taken immediately.

        Args:
            hosts: Resolved hosts.
            metrics: Metric names.
            sampler_for: Builds the sampler of a (host, metric) pair.
            interval: Seconds between ticks.
            timeout: Deadline of one sample (defaults to interval).

        Returns:
            Handle exposing result slots.
        """
        if interval <= 0:
            raise ValueError(f"Invalid poll interval: {interval}")
        deadline = timeout if timeout is not None else interval
        if deadline <= 0:
            raise ValueError(f"Invalid sample timeout: {deadline}")

        metric_names = list(metrics)
        handle = PollHandle(interval=interval, timeout=deadline)

        try:
            for host in hosts:
                for metric in metric_names:
                    key = (host.address, metric)
                    if key in handle.slots:
                        raise ValueError(f"Duplicate poll task for {host.address}/{metric}")
                    slot = ResultSlot(host.address, metric)
                    sampler = sampler_for(host, metric)
                    task = asyncio.create_task(
                        self._poll(handle, slot, sampler),
                        name=f"poll:{host.address}:{metric}",
                    )
                    task.add_done_callback(self._on_task_done)
                    handle.slots[key] = slot
                    handle.tasks[key] = task
        except BaseException:
            # No handle reaches the caller, tear down what was spawned
            handle.stop_event.set()
            for key, task in handle.tasks.items():
                handle.slots[key].close()
                task.cancel()
            raise

        logger.info(
            f"📊 Polling {len(handle.tasks)} task(s) for {len(hosts)} host(s) "
            f"every {interval:g}s"
        )
        return handle

    async def stop(self, handle: PollHandle, grace: float = DEFAULT_SHUTDOWN_GRACE) -> None:
        """
        Stop every task of a session.

        Slots are closed first, so nothing is written after this returns even
        if a task has to be abandoned.

        Raises:
            EngineShutdownError: If tasks are still alive after `grace` seconds.
        """
        handle.stop_event.set()
        for slot in handle.slots.values():
            slot.close()

        pending = {task: key for key, task in handle.tasks.items() if not task.done()}
        for task in pending:
            task.cancel()
        if not pending:
            return

        _done, still_running = await asyncio.wait(list(pending), timeout=max(grace, 0))
        if still_running:
            stuck = sorted(pending[task] for task in still_running)
            error = EngineShutdownError(stuck, grace)
            logger.error(f"❌ {error}")
            raise error

        logger.debug(f"🧹 Stopped {len(pending)} polling task(s)")

    async def _poll(self, handle: PollHandle, slot: ResultSlot, sampler: Sampler) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time()

        while handle.running:
            await self._tick(handle, slot, sampler)

            next_tick += handle.interval
            now = loop.time()
            if next_tick < now:
                # Sample overran its tick, skip the missed ones
                missed = int((now - next_tick) // handle.interval) + 1
                next_tick += missed * handle.interval

            try:
                await asyncio.wait_for(handle.stop_event.wait(), timeout=next_tick - now)
            except TimeoutError:
                continue

    async def _tick(self, handle: PollHandle, slot: ResultSlot, sampler: Sampler) -> None:
        try:
            value = await asyncio.wait_for(sampler(handle.timeout), timeout=handle.timeout)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            cause: Exception = e
            if isinstance(e, TimeoutError):
                cause = CommandTimeoutError(slot.address, handle.timeout)
            self._record_failure(slot, PollError(slot.address, slot.metric, cause))
            return

        recovered = slot.read().consecutive_failures > 0
        if slot.record_success(value) and recovered:
            logger.info(f"✅ {slot.address}/{slot.metric} recovered")

    @staticmethod
    def _record_failure(slot: ResultSlot, error: PollError) -> None:
        first = slot.read().consecutive_failures == 0
        if not slot.record_failure(error):
            return
        if first:
            logger.warning(f"⚠️ {error}")
        else:
            logger.debug(f"{error}")

    @staticmethod
    def _on_task_done(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"❌ Polling task {task.get_name()} crashed: {error!r}")
