"""
FleetDash Config - Application settings.

Process-level settings read from FLEETDASH_* environment variables. The
dashboard document (hosts, metrics, interval) lives in loader.py.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

from fleetdash.core.exceptions import ConfigError

ENV_PREFIX = "FLEETDASH_"


class AppSettings(BaseModel):
    """Runtime settings, overridable from the CLI."""

    log_level: Literal["debug", "info", "warning", "error"] = Field(
        default="info", description="File log level"
    )
    log_dir: Path = Field(
        default=Path.home() / ".fleetdash" / "logs", description="Log directory path"
    )
    page_size: int = Field(default=5, ge=1, le=50, description="Hosts per dashboard page")
    refresh_per_second: float = Field(
        default=4.0, gt=0, le=30, description="Dashboard redraw rate"
    )
    shutdown_grace: float = Field(
        default=5.0, ge=0, le=60, description="Seconds to wait for polling tasks on exit"
    )
    connect_timeout: float = Field(
        default=10.0, gt=0, le=120, description="SSH connection timeout in seconds"
    )
    log_panel_lines: int = Field(
        default=8, ge=1, le=100, description="Lines kept in the dashboard log panel"
    )

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> AppSettings:
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read instead of os.environ.

        Raises:
            ConfigError: If a variable has an invalid value.
        """
        env = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = env.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw.strip():
                values[name] = raw.strip().lower() if name == "log_level" else raw.strip()
        try:
            return cls(**values)
        except ValidationError as e:
            first = e.errors()[0]
            field = str(first["loc"][0]) if first["loc"] else None
            raise ConfigError(
                first["msg"],
                node="environment",
                field=f"{ENV_PREFIX}{field.upper()}" if field else None,
                cause=e,
            ) from e
