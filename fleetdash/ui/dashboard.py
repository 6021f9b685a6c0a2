"""
FleetDash UI - Terminal dashboard.

Rich `Live` renders the current page of hosts with one column per metric,
a detail view for a selected host/metric and a rolling log panel.
prompt_toolkit reads keys in raw mode and drives the navigation callbacks.
"""

from __future__ import annotations

import asyncio
import sys
import threading
from collections import deque
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from loguru import logger
from prompt_toolkit.input import create_input
from prompt_toolkit.keys import Keys
from rich.console import Console, RenderableType
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from fleetdash.config.settings import AppSettings
from fleetdash.core.logging import add_panel_sink
from fleetdash.core.types import SampleStatus, ViewMode
from fleetdash.polling.engine import PollHandle, PollingEngine
from fleetdash.polling.slot import Sample
from fleetdash.ui.pager import page_count, paginate
from fleetdash.ui.state import UISnapshot, UIState

if TYPE_CHECKING:
    from prompt_toolkit.input import Input

    from fleetdash.inspectors.registry import InspectorSamplers
    from fleetdash.inventory.models import DashboardInfo, Host

DASHBOARD_THEME = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "red bold",
        "success": "green",
        "muted": "dim",
        "highlight": "magenta",
    }
)

HELP_TEXT = "n/→ next  p/← prev  1-9 host  m metric  esc back  q quit"

NEXT_KEYS = frozenset({"n", Keys.Right.value, Keys.PageDown.value})
PREV_KEYS = frozenset({"p", Keys.Left.value, Keys.PageUp.value})
BACK_KEYS = frozenset({"b", Keys.Escape.value, Keys.Backspace.value})
QUIT_KEYS = frozenset({"q", Keys.ControlC.value})
METRIC_KEYS = frozenset({"m", Keys.Tab.value})


class LogBuffer:
    """Last N log lines shown in the log panel."""

    def __init__(self, max_lines: int) -> None:
        self._lines: deque[str] = deque(maxlen=max_lines)
        self._lock = threading.Lock()

    def write(self, line: str) -> None:
        with self._lock:
            self._lines.append(line)

    def lines(self) -> list[str]:
        with self._lock:
            return list(self._lines)


def _age(moment: datetime | None) -> str:
    if moment is None:
        return "never"
    seconds = int((datetime.now(UTC) - moment).total_seconds())
    return f"{max(seconds, 0)}s ago"


class DashboardView:
    """Pure rendering of dashboard state."""

    def __init__(
        self,
        info: DashboardInfo,
        pages: list[list[Host]],
        summarize: Callable[[str, Any], str],
        details: Callable[[str, Any], list[tuple[str, str]]],
    ) -> None:
        self.info = info
        self.pages = pages
        self.summarize = summarize
        self.details = details

    def cell(self, metric: str, sample: Sample | None) -> Text:
        """Table cell of one (host, metric) sample."""
        if sample is None or sample.status == SampleStatus.PENDING:
            return Text("…", style="muted")
        if sample.status == SampleStatus.OK:
            return Text(self.summarize(metric, sample.value))
        if sample.stale:
            return Text(f"{self.summarize(metric, sample.value)} (stale)", style="warning")
        return Text("error", style="error")

    def header(self, ui: UISnapshot) -> Panel:
        page = f"page {ui.page_index + 1}/{ui.page_count}" if ui.page_count else "no hosts"
        text = Text.assemble(
            (self.info.title, "bold highlight"),
            "   ",
            (f"{page} · {len(self.info.hosts)} hosts · every {self.info.poll_interval}s", "info"),
        )
        return Panel(text, subtitle=HELP_TEXT, border_style="info")

    def host_table(self, ui: UISnapshot, samples: Mapping[tuple[str, str], Sample]) -> Table:
        table = Table(show_header=True, header_style="bold", expand=True)
        table.add_column("#", style="muted", width=3)
        table.add_column("Host")
        table.add_column("Driver", style="info")
        table.add_column("Alias")
        for metric in self.info.metrics:
            style = "highlight" if metric == ui.selected_metric else None
            table.add_column(metric, header_style=style)

        page = self.pages[ui.page_index] if self.pages else []
        for position, host in enumerate(page, start=1):
            cells = [
                self.cell(metric, samples.get((host.address, metric)))
                for metric in self.info.metrics
            ]
            table.add_row(
                str(position),
                host.address,
                host.connection.type.value,
                host.label,
                *cells,
            )
        return table

    def detail(self, ui: UISnapshot, samples: Mapping[tuple[str, str], Sample]) -> Panel:
        address = ui.selected_host or ""
        metric = ui.selected_metric or ""
        sample = samples.get((address, metric))

        table = Table(show_header=False, box=None, expand=True)
        table.add_column(style="bold")
        table.add_column()
        if sample is None:
            table.add_row("status", Text("not polled", style="muted"))
        else:
            table.add_row("status", self.cell(metric, sample))
            if sample.updated_at is not None:
                for label, value in self.details(metric, sample.value):
                    table.add_row(label, value)
            table.add_row("updated", _age(sample.updated_at))
            if sample.error:
                table.add_row("error", Text(sample.error, style="error"))
                table.add_row("failures", str(sample.consecutive_failures))

        return Panel(table, title=f"{address} - {metric}", border_style="highlight")

    def logs(self, lines: list[str]) -> Panel:
        text = Text("\n".join(lines), style="muted")
        return Panel(text, title="Log reports", border_style="muted")

    def render(
        self,
        ui: UISnapshot,
        samples: Mapping[tuple[str, str], Sample],
        log_lines: list[str],
    ) -> RenderableType:
        if ui.view == ViewMode.DETAIL and ui.selected_host:
            body: RenderableType = self.detail(ui, samples)
        else:
            body = Panel(self.host_table(ui, samples), title="Hosts", border_style="info")

        layout = Layout()
        layout.split_column(
            Layout(self.header(ui), name="header", size=3),
            Layout(body, name="body", ratio=3),
            Layout(self.logs(log_lines), name="logs", size=len(log_lines) + 2 if log_lines else 3),
        )
        return layout


class DashboardController:
    """
    Own the dashboard session: polling, input and rendering.

    The controller never samples anything itself, it reads result slots of
    the polling handle and mutates UIState from key callbacks.
    """

    def __init__(
        self,
        info: DashboardInfo,
        samplers: InspectorSamplers,
        settings: AppSettings | None = None,
        engine: PollingEngine | None = None,
        console: Console | None = None,
    ) -> None:
        self.info = info
        self.samplers = samplers
        self.settings = settings or AppSettings()
        self.engine = engine or PollingEngine()
        self.console = console or Console(theme=DASHBOARD_THEME)
        self.pages = paginate(info.hosts, self.settings.page_size)
        self.state = UIState(
            page_count(len(info.hosts), self.settings.page_size), list(info.metrics)
        )
        self.logs = LogBuffer(self.settings.log_panel_lines)
        self.view = DashboardView(info, self.pages, samplers.summarize, samplers.details)
        self.handle: PollHandle | None = None
        self._quit = asyncio.Event()

    # -------------------------------------------------------------------------
    # Callbacks
    # -------------------------------------------------------------------------

    def on_next(self) -> None:
        index = self.state.next_page()
        logger.info(f"Moving on to next page {index + 1}")

    def on_prev(self) -> None:
        index = self.state.prev_page()
        logger.info(f"Moving on to previous page {index + 1}")

    def on_select_host(self, address: str, metric: str | None = None) -> None:
        self.state.select(address, metric)
        snapshot = self.state.snapshot()
        logger.info(f"View {address} - {snapshot.selected_metric}")

    def on_select_position(self, position: int) -> None:
        """Select the n-th host (1-based) of the current page."""
        if not self.pages:
            return
        page = self.pages[self.state.page_index]
        if 1 <= position <= len(page):
            self.on_select_host(page[position - 1].address)

    def on_cycle_metric(self) -> None:
        metric = self.state.cycle_metric()
        if metric:
            logger.info(f"Selected metric {metric}")

    def on_back(self) -> None:
        self.state.back()

    def on_quit(self) -> None:
        self._quit.set()

    def handle_key(self, key: str | Keys) -> None:
        """Dispatch one key press."""
        # Keys members hash by name, compare by value
        if isinstance(key, Keys):
            key = key.value
        if key in QUIT_KEYS:
            self.on_quit()
        elif key in NEXT_KEYS:
            self.on_next()
        elif key in PREV_KEYS:
            self.on_prev()
        elif key in METRIC_KEYS:
            self.on_cycle_metric()
        elif key in BACK_KEYS:
            self.on_back()
        elif len(key) == 1 and key.isdigit() and key != "0":
            self.on_select_position(int(key))

    # -------------------------------------------------------------------------
    # Rendering / lifecycle
    # -------------------------------------------------------------------------

    def render(self) -> RenderableType:
        """Current frame. Called from rich's refresh thread."""
        samples = self.handle.snapshot() if self.handle else {}
        return self.view.render(self.state.snapshot(), samples, self.logs.lines())

    def _read_keys(self, keyboard: Input) -> None:
        for key_press in keyboard.read_keys() + keyboard.flush_keys():
            self.handle_key(key_press.key)

    async def _wait_for_quit(self) -> None:
        if not sys.stdin.isatty():
            logger.info("stdin is not a terminal, keyboard input disabled")
            await self._quit.wait()
            return

        keyboard = create_input()
        with keyboard.raw_mode(), keyboard.attach(lambda: self._read_keys(keyboard)):
            await self._quit.wait()

    async def run(self) -> None:
        """
        Run until the user quits.

        Raises:
            EngineShutdownError: If polling tasks could not be stopped in time.
        """
        sink_id = add_panel_sink(self.logs.write)
        logger.info(f"Starting {self.info.title}")
        try:
            self.handle = self.engine.start(
                self.info.hosts,
                self.info.metrics,
                self.samplers,
                self.info.poll_interval,
            )
            with Live(
                get_renderable=self.render,
                console=self.console,
                refresh_per_second=self.settings.refresh_per_second,
                screen=True,
                redirect_stderr=False,
            ):
                await self._wait_for_quit()
        finally:
            try:
                if self.handle is not None:
                    await self.engine.stop(self.handle, grace=self.settings.shutdown_grace)
            finally:
                await self.samplers.pool.close_all()
                logger.remove(sink_id)
