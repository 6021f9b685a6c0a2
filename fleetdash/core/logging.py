"""
FleetDash Core - Logging configuration.

Rules:
1. FILE: always log to <log_dir>/fleetdash.log (rotated).
2. CONSOLE: only with verbose, the dashboard owns the terminal otherwise.
3. DASHBOARD: while the dashboard runs, INFO+ records also feed its log panel.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from fleetdash.config.settings import AppSettings

LOG_FILE_NAME = "fleetdash.log"

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
PANEL_FORMAT = "{time:HH:mm:ss} {level: <7} {message}"


def configure_logging(settings: AppSettings | None = None, verbose: bool = False) -> None:
    """
    Configure loguru sinks.

    Args:
        settings: Application settings (log level and directory).
        verbose: Also log to stderr at DEBUG level.
    """
    from fleetdash.config.settings import AppSettings

    settings = settings or AppSettings()
    logger.remove()

    log_dir = Path(settings.log_dir).expanduser()
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_dir / LOG_FILE_NAME,
            rotation="10 MB",
            retention="1 week",
            compression="gz",
            level=settings.log_level.upper(),
            format=FILE_FORMAT,
            enqueue=True,
        )
    except OSError as e:
        # No file sink, keep stderr so the problem is visible
        logger.add(sys.stderr, format=CONSOLE_FORMAT, level="WARNING", colorize=True)
        logger.warning(f"Could not setup file logging in {log_dir}: {e}")

    if verbose:
        logger.add(sys.stderr, format=CONSOLE_FORMAT, level="DEBUG", colorize=True)


def add_panel_sink(write: Callable[[str], None], level: str = "INFO") -> int:
    """
    Route log records to a dashboard panel.

    Args:
        write: Called with each formatted line.
        level: Minimum level forwarded to the panel.

    Returns:
        Sink id, pass it to `logger.remove` when the dashboard closes.
    """

    def _sink(message: object) -> None:
        write(str(message).rstrip("\n"))

    return logger.add(_sink, level=level, format=PANEL_FORMAT, colorize=False)
