"""
FleetDash Inventory - Resolve the configuration tree into hosts.

Connections are inherited from the nearest ancestor that declares one and
every leaf becomes exactly one Host. Errors from independent subtrees are
collected and reported together.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from loguru import logger
from pydantic import ValidationError

from fleetdash.config.models import ConnectionSpec
from fleetdash.core.exceptions import ConfigError, ConnectionDecodeError, InventoryError
from fleetdash.inventory.models import DashboardInfo, Host
from fleetdash.inventory.tree import GroupNode, LeafNode, Node, iter_leaves

if TYPE_CHECKING:
    from fleetdash.config.loader import DashboardConfig
    from fleetdash.inspectors.registry import MetricRegistry


def describe_validation_error(error: Exception) -> str:
    """Turn a pydantic error into a one-line reason."""
    if not isinstance(error, ValidationError):
        return str(error)
    parts = []
    for item in error.errors():
        message = item["msg"].removeprefix("Value error, ")
        loc = ".".join(str(part) for part in item["loc"])
        parts.append(f"{loc}: {message}" if loc else message)
    return "; ".join(parts)


def decode_connection(raw: Mapping[str, Any]) -> ConnectionSpec:
    """
    Decode a `connection` block.

    Raises:
        ValidationError: If a field is invalid or credentials conflict.
        ValueError: If the block sets `target_host`, which comes from the host name.
    """
    data = {str(key): value for key, value in raw.items()}
    if "target_host" in data:
        raise ValueError("target_host cannot be set, it is taken from the host name")
    return ConnectionSpec.model_validate(data)


class InventoryResolver:
    """Recursive descent over the node tree."""

    def __init__(self) -> None:
        self.errors: list[ConfigError] = []

    def resolve(self, node: Node, inherited: ConnectionSpec) -> list[Host]:
        """
        Resolve `node` and its subtree.

        Args:
            node: Tree node to resolve.
            inherited: Connection of the nearest ancestor.

        Returns:
            Hosts in traversal order. Errors are appended to `self.errors`.
        """
        connection = inherited
        if node.connection is not None:
            try:
                connection = decode_connection(node.connection)
            except (ValidationError, ValueError) as e:
                affected = [leaf.name for leaf in iter_leaves(node)]
                error = ConnectionDecodeError(node.path, describe_validation_error(e), affected)
                logger.error(f"❌ {error}")
                self.errors.append(error)

        logger.debug(f"Loading config for {node.path} with connection type {connection.type}")

        if isinstance(node, GroupNode):
            hosts: list[Host] = []
            for child in node.children:
                hosts.extend(self.resolve(child, connection))
            return hosts

        if not node.name.strip():
            self.errors.append(ConfigError("host name cannot be empty", node=node.path))
            return []
        return [self._make_host(node, connection)]

    @staticmethod
    def _make_host(node: LeafNode, connection: ConnectionSpec) -> Host:
        return Host(address=node.name, alias=node.alias, connection=connection.bind(node.name))


def resolve_inventory(root: Node, default: ConnectionSpec | None = None) -> tuple[Host, ...]:
    """
    Resolve the whole inventory.

    Args:
        root: Decoded `hosts` tree.
        default: Connection used when no ancestor declares one (local).

    Raises:
        InventoryError: If any node failed or addresses are duplicated.
    """
    if isinstance(root, LeafNode):
        raise ConfigError("no hosts declared, add them under children", node=root.path)

    resolver = InventoryResolver()
    hosts = resolver.resolve(root, default or ConnectionSpec())
    errors = list(resolver.errors)

    seen: dict[str, Host] = {}
    for host in hosts:
        if host.address in seen:
            errors.append(ConfigError(f"duplicate host '{host.address}'", node=root.path))
        seen[host.address] = host

    if not hosts and not errors:
        errors.append(ConfigError("no hosts declared, add them under children", node=root.path))

    if errors:
        raise InventoryError(errors)

    for host in hosts:
        logger.debug(f"{host.address}: {host.connection!r}")
    return tuple(hosts)


def validate_metrics(
    metrics: Mapping[str, str | None], registry: MetricRegistry
) -> dict[str, str | None]:
    """
    Check configured metric names against the registry.

    Raises:
        ConfigError: On an unknown metric or a metric missing its command.
    """
    validated: dict[str, str | None] = {}
    for name, command in metrics.items():
        if not registry.valid(name):
            known = ", ".join(registry.names())
            raise ConfigError(f"found invalid metric '{name}' (known: {known})", node="metrics")
        if registry.requires_command(name) and not command:
            raise ConfigError(f"metric '{name}' needs a command", node="metrics", field=name)
        validated[name] = command
    return validated


def build_dashboard_info(config: DashboardConfig, registry: MetricRegistry) -> DashboardInfo:
    """
    Validate metrics and resolve hosts of a loaded configuration.

    Raises:
        ConfigError: If any part of the configuration is invalid.
    """
    metrics = validate_metrics(config.metrics, registry)
    hosts = resolve_inventory(config.hosts)
    logger.info(f"📋 Loaded {len(hosts)} host(s) and {len(metrics)} metric(s)")
    return DashboardInfo(
        hosts=hosts,
        metrics=metrics,
        title=config.title,
        poll_interval=config.poll_interval,
    )
