"""
FleetDash Inventory - Configuration tree nodes.

The `hosts` section of the document is decoded once into a tagged tree:
a node with `children` is a GroupNode, any other node is a LeafNode.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from fleetdash.core.exceptions import ConfigError, InventoryError

ROOT_NAME = "root"
MAX_TREE_DEPTH = 32

LEAF_KEYS = frozenset({"connection", "alias"})
GROUP_KEYS = frozenset({"connection", "children"})


@dataclass(frozen=True)
class LeafNode:
    """A single host."""

    name: str
    path: str
    alias: str = ""
    connection: Mapping[str, Any] | None = None


@dataclass(frozen=True)
class GroupNode:
    """A group of nodes. Never an addressable host itself."""

    name: str
    path: str
    children: tuple[Node, ...] = field(default_factory=tuple)
    connection: Mapping[str, Any] | None = None


Node = LeafNode | GroupNode


def iter_leaves(node: Node) -> list[LeafNode]:
    """Leaves under `node` in traversal order."""
    if isinstance(node, LeafNode):
        return [node]
    leaves: list[LeafNode] = []
    for child in node.children:
        leaves.extend(iter_leaves(child))
    return leaves


class TreeDecoder:
    """
    Decode raw YAML mappings into Node objects.

    Errors are collected so that every broken subtree is reported at once;
    `decode` raises a single InventoryError when anything failed.
    """

    def __init__(self, max_depth: int = MAX_TREE_DEPTH) -> None:
        self.max_depth = max_depth
        self.errors: list[ConfigError] = []
        self._active: set[int] = set()

    def decode(self, raw: Any, name: str = ROOT_NAME) -> Node:
        """
        Decode the tree rooted at `raw`.

        Raises:
            InventoryError: If any node is malformed.
        """
        self.errors = []
        self._active = set()
        node = self._decode_node(name, name, raw, depth=0)
        if self.errors:
            raise InventoryError(self.errors)
        return node

    def _error(self, message: str, path: str, field_name: str | None = None) -> None:
        error = ConfigError(message, node=path, field=field_name)
        logger.error(f"❌ {error}")
        self.errors.append(error)

    def _decode_node(self, name: str, path: str, raw: Any, depth: int) -> Node:
        if depth > self.max_depth:
            self._error(f"tree is deeper than {self.max_depth} levels", path)
            return GroupNode(name=name, path=path)

        if raw is None:
            # Bare leaf without attributes
            return LeafNode(name=name, path=path)

        if not isinstance(raw, Mapping):
            self._error(f"expected a mapping, got {type(raw).__name__}", path)
            return LeafNode(name=name, path=path)

        marker = id(raw)
        if marker in self._active:
            self._error("node references itself (cyclic anchor/alias)", path)
            return GroupNode(name=name, path=path)

        self._active.add(marker)
        try:
            return self._decode_mapping(name, path, raw, depth)
        finally:
            self._active.discard(marker)

    def _decode_mapping(self, name: str, path: str, raw: Mapping, depth: int) -> Node:
        connection = raw.get("connection")
        if connection is not None and not isinstance(connection, Mapping):
            self._error(
                f"expected a mapping, got {type(connection).__name__}", path, "connection"
            )
            connection = None

        if "children" in raw:
            unknown = set(map(str, raw)) - GROUP_KEYS
            if "alias" in unknown:
                logger.warning(f"⚠️ {path}: alias is ignored on groups")
                unknown.discard("alias")
            if unknown:
                logger.warning(f"⚠️ {path}: ignoring unknown keys {sorted(unknown)}")

            children_raw = raw["children"]
            if not isinstance(children_raw, Mapping):
                self._error(
                    f"failed to parse children, expected a mapping, got "
                    f"{type(children_raw).__name__}",
                    path,
                    "children",
                )
                return GroupNode(name=name, path=path, connection=connection)

            children = tuple(
                self._decode_node(str(key), f"{path}:{key}", value, depth + 1)
                for key, value in children_raw.items()
            )
            return GroupNode(name=name, path=path, children=children, connection=connection)

        unknown = set(map(str, raw)) - LEAF_KEYS
        if unknown:
            logger.warning(f"⚠️ {path}: ignoring unknown keys {sorted(unknown)}")

        alias = raw.get("alias")
        if alias is not None and not isinstance(alias, (str, int, float)):
            self._error(f"expected a string, got {type(alias).__name__}", path, "alias")
            alias = None
        return LeafNode(
            name=name,
            path=path,
            alias="" if alias is None else str(alias),
            connection=connection,
        )


def decode_tree(raw: Any, max_depth: int = MAX_TREE_DEPTH) -> Node:
    """Decode the `hosts` section into a Node tree."""
    return TreeDecoder(max_depth=max_depth).decode(raw)
