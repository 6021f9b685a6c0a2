"""
FleetDash Inventory - Host tree decoding and resolution.
"""

from fleetdash.inventory.models import DashboardInfo, Host
from fleetdash.inventory.resolver import (
    InventoryResolver,
    build_dashboard_info,
    decode_connection,
    resolve_inventory,
    validate_metrics,
)
from fleetdash.inventory.tree import (
    MAX_TREE_DEPTH,
    ROOT_NAME,
    GroupNode,
    LeafNode,
    Node,
    decode_tree,
    iter_leaves,
)

__all__ = [
    "MAX_TREE_DEPTH",
    "ROOT_NAME",
    "DashboardInfo",
    "GroupNode",
    "Host",
    "InventoryResolver",
    "LeafNode",
    "Node",
    "build_dashboard_info",
    "decode_connection",
    "decode_tree",
    "iter_leaves",
    "resolve_inventory",
    "validate_metrics",
]
