#!/usr/bin/env python3
"""
FleetDash CLI - Main entry point.

This module provides:
- Configuration loading and validation
- Inventory check (--check)
- Dashboard launch
"""

from __future__ import annotations

import asyncio
import sys

import click
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from fleetdash import __version__
from fleetdash.config import AppSettings, load_config
from fleetdash.core.exceptions import ConfigError, EngineShutdownError
from fleetdash.core.logging import configure_logging
from fleetdash.drivers import DriverPool
from fleetdash.inspectors import InspectorSamplers, MetricRegistry
from fleetdash.inventory import DashboardInfo, build_dashboard_info
from fleetdash.ui.dashboard import DASHBOARD_THEME, DashboardController

console = Console(theme=DASHBOARD_THEME)


def print_inventory(info: DashboardInfo) -> None:
    """Print resolved hosts and metrics."""
    console.print(f"\n[bold]{escape(info.title)}[/bold] [dim](every {info.poll_interval}s)[/dim]\n")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Host")
    table.add_column("Alias")
    table.add_column("Driver", style="info")
    table.add_column("User")
    table.add_column("Port")
    for host in info.hosts:
        connection = host.connection
        table.add_row(
            host.address,
            host.label,
            connection.type.value,
            connection.username or "-",
            str(connection.port) if connection.is_remote else "-",
        )
    console.print(table)

    metrics = ", ".join(
        f"{name} ({command})" if command else name for name, command in info.metrics.items()
    )
    console.print(f"\n  Metrics: [cyan]{metrics or 'none'}[/cyan]\n")


def run_dashboard(controller: DashboardController) -> None:
    """
    Run the dashboard on its own event loop.

    When polling tasks survive the shutdown grace period, the loop is closed
    with them still pending instead of cancelling and awaiting them again.

    Raises:
        EngineShutdownError: If polling tasks were abandoned.
        KeyboardInterrupt: On Ctrl-C outside the dashboard's raw mode.
    """
    runner = asyncio.Runner()
    abandoned = False
    try:
        runner.run(controller.run())
    except EngineShutdownError:
        abandoned = True
        raise
    finally:
        if abandoned:
            runner.get_loop().close()
        else:
            runner.close()


@click.command()
@click.version_option(version=__version__, prog_name="fleetdash")
@click.argument("config", type=click.Path(dir_okay=False))
@click.option(
    "--page-size",
    "-s",
    type=click.IntRange(1, 50),
    default=None,
    help="Hosts per page (default: FLEETDASH_PAGE_SIZE or 5)",
)
@click.option("--verbose", "-v", is_flag=True, help="Also log to stderr")
@click.option("--check", is_flag=True, help="Validate the config, print the inventory and exit")
def main(config: str, page_size: int | None, verbose: bool, check: bool) -> None:
    """Live terminal dashboard of metrics polled from a fleet of hosts."""
    try:
        settings = AppSettings.from_env()
    except ConfigError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]", soft_wrap=True)
        sys.exit(1)

    if page_size is not None:
        settings = settings.model_copy(update={"page_size": page_size})

    configure_logging(settings, verbose=verbose)

    registry = MetricRegistry()
    try:
        info = build_dashboard_info(load_config(config), registry)
    except ConfigError as e:
        logger.error(f"❌ Invalid configuration: {e}")
        console.print(f"[red]Error: {escape(str(e))}[/red]", soft_wrap=True)
        sys.exit(1)

    if check:
        print_inventory(info)
        console.print("[green]✅ Configuration is valid[/green]")
        return

    samplers = InspectorSamplers(registry, info.metrics, DriverPool(settings.connect_timeout))
    controller = DashboardController(info, samplers, settings=settings, console=console)

    try:
        run_dashboard(controller)
    except KeyboardInterrupt:
        console.print("\n[yellow]Goodbye![/yellow]")
    except EngineShutdownError as e:
        console.print(f"[yellow]⚠️  {escape(str(e))}[/yellow]", soft_wrap=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
