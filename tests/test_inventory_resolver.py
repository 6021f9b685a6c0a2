"""Tests for host tree decoding and inventory resolution."""

from __future__ import annotations

import pytest
import yaml

from fleetdash.config.loader import parse_document
from fleetdash.core.exceptions import ConfigError, ConnectionDecodeError, InventoryError
from fleetdash.core.types import ConnectionType
from fleetdash.inspectors import MetricRegistry
from fleetdash.inventory import (
    GroupNode,
    LeafNode,
    build_dashboard_info,
    decode_tree,
    iter_leaves,
    resolve_inventory,
    validate_metrics,
)


def resolve(raw: object):
    return resolve_inventory(decode_tree(raw))


class TestTreeDecoder:
    """Tests for decoding the hosts section."""

    def test_group_and_leaves(self) -> None:
        root = decode_tree({"children": {"web": {"children": {"web1": None}}, "db": {}}})

        assert isinstance(root, GroupNode)
        assert [leaf.path for leaf in iter_leaves(root)] == ["root:web:web1", "root:db"]

    def test_leaf_alias(self) -> None:
        root = decode_tree({"children": {"db1": {"alias": "primary"}}})

        leaf = root.children[0]
        assert isinstance(leaf, LeafNode)
        assert leaf.alias == "primary"

    def test_missing_hosts_is_bare_root(self) -> None:
        assert isinstance(decode_tree(None), LeafNode)

    def test_children_must_be_mapping(self) -> None:
        with pytest.raises(InventoryError, match="failed to parse children"):
            decode_tree({"children": ["web1", "web2"]})

    def test_node_must_be_mapping(self) -> None:
        with pytest.raises(InventoryError, match="root:web: expected a mapping"):
            decode_tree({"children": {"web": "10.0.0.1"}})

    def test_depth_limit(self) -> None:
        raw: dict = {}
        node = raw
        for level in range(5):
            node["children"] = {f"g{level}": {}}
            node = node["children"][f"g{level}"]

        decode_tree(raw, max_depth=5)
        with pytest.raises(InventoryError, match="deeper than 3 levels"):
            decode_tree(raw, max_depth=3)

    def test_cycle_rejected(self) -> None:
        """Test a YAML alias pointing at its own ancestor is reported."""
        document = yaml.safe_load(
            """
            hosts: &top
              children:
                loop: *top
            """
        )

        with pytest.raises(InventoryError, match="references itself"):
            decode_tree(document["hosts"])

    def test_shared_anchor_is_not_a_cycle(self) -> None:
        """Test sibling reuse of one anchor decodes twice."""
        document = yaml.safe_load(
            """
            hosts:
              children:
                a: &leaf {alias: same}
                b: *leaf
            """
        )

        root = decode_tree(document["hosts"])

        assert [leaf.alias for leaf in iter_leaves(root)] == ["same", "same"]

    def test_errors_are_accumulated(self) -> None:
        with pytest.raises(InventoryError) as exc_info:
            decode_tree({"children": {"a": "x", "b": {"children": 3}}})

        assert len(exc_info.value.errors) == 2


class TestResolveInventory:
    """Tests for connection inheritance and host creation."""

    def test_inheritance_from_root(self) -> None:
        hosts = resolve(
            {
                "connection": {"type": "local"},
                "children": {
                    "web": {"connection": {"type": "ssh", "port": 2222}},
                    "db": {},
                },
            }
        )

        web, db = hosts
        assert web.address == "web"
        assert web.connection.type == ConnectionType.SSH
        assert web.connection.port == 2222
        assert db.address == "db"
        assert db.connection.type == ConnectionType.LOCAL

    def test_nearest_ancestor_wins(self) -> None:
        hosts = resolve(
            {
                "connection": {"type": "ssh", "username": "root"},
                "children": {
                    "web": {
                        "connection": {"type": "ssh", "username": "deploy"},
                        "children": {"web1": None, "web2": None},
                    },
                    "db1": None,
                },
            }
        )

        assert [(h.address, h.connection.username) for h in hosts] == [
            ("web1", "deploy"),
            ("web2", "deploy"),
            ("db1", "root"),
        ]

    def test_connection_bound_to_host(self) -> None:
        hosts = resolve({"connection": {"type": "ssh"}, "children": {"a": None, "b": None}})

        assert [h.connection.target_host for h in hosts] == ["a", "b"]

    def test_default_is_local(self) -> None:
        (host,) = resolve({"children": {"db": None}})

        assert host.connection.type == ConnectionType.LOCAL
        assert host.label == "None"

    def test_alias(self) -> None:
        (host,) = resolve({"children": {"db": {"alias": "primary"}}})

        assert host.label == "primary"

    def test_root_without_children(self) -> None:
        with pytest.raises(ConfigError, match="no hosts declared"):
            resolve(None)

    def test_duplicate_hosts(self) -> None:
        with pytest.raises(InventoryError, match="duplicate host 'web1'"):
            resolve(
                {
                    "children": {
                        "a": {"children": {"web1": None}},
                        "b": {"children": {"web1": None}},
                    }
                }
            )

    def test_bad_connection_lists_affected_hosts(self) -> None:
        with pytest.raises(InventoryError) as exc_info:
            resolve(
                {
                    "children": {
                        "web": {
                            "connection": {"type": "ssh", "password": "x", "private_key_path": "k"},
                            "children": {"web1": None, "web2": None},
                        },
                        "db": None,
                    }
                }
            )

        (error,) = exc_info.value.errors
        assert isinstance(error, ConnectionDecodeError)
        assert error.node == "root:web"
        assert error.affected_hosts == ["web1", "web2"]
        assert "cannot specify both password login" in str(error)

    def test_errors_from_independent_subtrees(self) -> None:
        with pytest.raises(InventoryError) as exc_info:
            resolve(
                {
                    "children": {
                        "a": {"connection": {"type": "telnet"}},
                        "b": {"connection": {"type": "ssh", "port": -1}},
                        "c": None,
                    }
                }
            )

        assert [e.node for e in exc_info.value.errors] == ["root:a", "root:b"]

    def test_target_host_cannot_be_set(self) -> None:
        with pytest.raises(InventoryError, match="target_host cannot be set"):
            resolve({"children": {"a": {"connection": {"target_host": "elsewhere"}}}})


class TestValidateMetrics:
    """Tests for metric name validation."""

    def test_known_metrics(self) -> None:
        metrics = validate_metrics({"disk": None, "custom": "uptime"}, MetricRegistry())

        assert metrics == {"disk": None, "custom": "uptime"}

    def test_unknown_metric(self) -> None:
        with pytest.raises(ConfigError, match="found invalid metric 'cpu'"):
            validate_metrics({"cpu": None}, MetricRegistry())

    def test_custom_needs_command(self) -> None:
        with pytest.raises(ConfigError, match="needs a command"):
            validate_metrics({"custom": None}, MetricRegistry())


class TestBuildDashboardInfo:
    """Tests for the full configuration pipeline."""

    def test_build(self) -> None:
        config = parse_document(
            {
                "title": "Prod",
                "poll-interval": 30,
                "metrics": {"uptime": None},
                "hosts": {"children": {"a": None, "b": {"alias": "bee"}}},
            }
        )

        info = build_dashboard_info(config, MetricRegistry())

        assert info.title == "Prod"
        assert info.poll_interval == 30
        assert info.addresses() == ["a", "b"]
        assert info.get_host("b").alias == "bee"
        assert info.get_host("zzz") is None

    def test_metrics_checked_before_hosts(self) -> None:
        config = parse_document(
            {"poll-interval": 5, "metrics": {"cpu": None}, "hosts": {"children": {"a": None}}}
        )

        with pytest.raises(ConfigError, match="invalid metric"):
            build_dashboard_info(config, MetricRegistry())
