"""
FleetDash Config - Dashboard document loader.

Reads the YAML document, validates the top-level keys and decodes the
host tree. Interval and metrics are checked before any host is resolved.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from fleetdash.core.exceptions import ConfigError
from fleetdash.inventory.tree import LeafNode, Node, decode_tree

DEFAULT_TITLE = "Fleet Dashboard"
MIN_POLL_INTERVAL = 5

KNOWN_KEYS = frozenset({"title", "poll-interval", "metrics", "hosts"})


@dataclass(frozen=True)
class DashboardConfig:
    """A validated dashboard document, hosts not yet resolved."""

    title: str
    poll_interval: int
    metrics: dict[str, str | None]
    hosts: Node = field(default_factory=lambda: LeafNode(name="root", path="root"))
    source: Path | None = None


def read_document(path: str | Path) -> dict[str, Any]:
    """
    Read and parse the YAML document.

    Raises:
        ConfigError: If the file is unreadable or not a YAML mapping.
    """
    config_path = Path(path).expanduser()
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(
            f"cannot read config file: {e.strerror or e}", node=str(config_path), cause=e
        ) from e

    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"malformed YAML: {e}", node=str(config_path), cause=e) from e

    if document is None:
        document = {}
    if not isinstance(document, Mapping):
        raise ConfigError(
            f"expected a mapping at top level, got {type(document).__name__}",
            node=str(config_path),
        )
    return {str(key): value for key, value in document.items()}


def parse_poll_interval(value: Any) -> int:
    """
    Validate `poll-interval`.

    Raises:
        ConfigError: If missing, not an integer, or below MIN_POLL_INTERVAL.
    """
    if value is None:
        raise ConfigError("is required (seconds)", field="poll-interval")
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(
            f"expected an integer number of seconds, got {value!r}", field="poll-interval"
        )
    if value < MIN_POLL_INTERVAL:
        raise ConfigError(
            f"cannot set poll interval below {MIN_POLL_INTERVAL} seconds (got {value})",
            field="poll-interval",
        )
    return value


def parse_metrics(value: Any) -> dict[str, str | None]:
    """
    Normalise `metrics` into name -> optional custom command.

    Accepts a mapping, or a plain list of names without custom commands.

    Raises:
        ConfigError: If the section has another shape.
    """
    if value is None:
        return {}
    if isinstance(value, list):
        items = [(entry, None) for entry in value]
    elif isinstance(value, Mapping):
        items = list(value.items())
    else:
        raise ConfigError(
            f"expected a mapping of metric name to command, got {type(value).__name__}",
            field="metrics",
        )

    metrics: dict[str, str | None] = {}
    for name, command in items:
        if not isinstance(name, str) or not name.strip():
            raise ConfigError(f"invalid metric name {name!r}", field="metrics")
        if command is not None and not isinstance(command, str):
            raise ConfigError(
                f"custom command must be a string, got {type(command).__name__}",
                node="metrics",
                field=name,
            )
        metrics[name.strip()] = command.strip() if command and command.strip() else None
    return metrics


def parse_title(value: Any) -> str:
    if value is None or value == "":
        return DEFAULT_TITLE
    if not isinstance(value, (str, int, float)):
        raise ConfigError(f"expected a string, got {type(value).__name__}", field="title")
    return str(value)


def parse_document(document: Mapping[str, Any], source: Path | None = None) -> DashboardConfig:
    """
    Validate a parsed document.

    The interval is checked first so a bad interval fails before any host
    tree work happens.

    Raises:
        ConfigError: On any invalid section.
    """
    unknown = set(document) - KNOWN_KEYS
    if unknown:
        logger.warning(f"⚠️ Ignoring unknown top-level keys: {sorted(unknown)}")

    poll_interval = parse_poll_interval(document.get("poll-interval"))
    title = parse_title(document.get("title"))
    metrics = parse_metrics(document.get("metrics"))
    hosts = decode_tree(document.get("hosts"))

    return DashboardConfig(
        title=title,
        poll_interval=poll_interval,
        metrics=metrics,
        hosts=hosts,
        source=source,
    )


def load_config(path: str | Path) -> DashboardConfig:
    """
    Load a dashboard document from disk.

    Raises:
        ConfigError: If the file cannot be read or is invalid.
    """
    config_path = Path(path).expanduser()
    logger.info(f"📁 Loading dashboard config from {config_path}")
    document = read_document(config_path)
    return parse_document(document, source=config_path)
