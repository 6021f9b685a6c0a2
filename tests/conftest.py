"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import textwrap
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from loguru import logger

from fleetdash.config.models import ConnectionSpec
from fleetdash.core.types import ConnectionType
from fleetdash.inventory.models import DashboardInfo, Host

pytest_plugins = ("pytest_asyncio",)


SAMPLE_CONFIG = """
title: Staging
poll-interval: 10
metrics:
  disk:
  custom: uptime -p
hosts:
  connection:
    type: local
  children:
    web:
      connection:
        type: ssh
        username: deploy
        port: 2222
      children:
        web1:
          alias: frontend
        web2:
    db:
"""


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[str], Path]:
    """Write a YAML document to a temporary file."""

    def _write(text: str, name: str = "dashboard.yaml") -> Path:
        path = tmp_path / name
        path.write_text(textwrap.dedent(text), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_config(write_config: Callable[[str], Path]) -> Path:
    return write_config(SAMPLE_CONFIG)


@pytest.fixture
def make_host() -> Callable[..., Host]:
    """Build a resolved host."""

    def _make(address: str, alias: str = "", **connection: object) -> Host:
        spec = ConnectionSpec.model_validate(connection or {"type": ConnectionType.LOCAL})
        return Host(address=address, alias=alias, connection=spec.bind(address))

    return _make


@pytest.fixture
def dashboard_info(make_host: Callable[..., Host]) -> DashboardInfo:
    hosts = tuple(make_host(f"host{i}") for i in range(1, 8))
    return DashboardInfo(
        hosts=hosts,
        metrics={"uptime": None, "custom": "echo ok"},
        title="Test fleet",
        poll_interval=10,
    )


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Capture loguru messages for the duration of a test."""
    messages: list[str] = []
    sink_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(sink_id)
