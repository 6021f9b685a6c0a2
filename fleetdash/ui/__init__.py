"""
FleetDash UI - Pagination, navigation state and terminal dashboard.
"""

from fleetdash.ui.pager import next_page, page_count, paginate, prev_page
from fleetdash.ui.state import UISnapshot, UIState
from fleetdash.ui.dashboard import DashboardController, DashboardView, LogBuffer

__all__ = [
    "DashboardController",
    "DashboardView",
    "LogBuffer",
    "UISnapshot",
    "UIState",
    "next_page",
    "page_count",
    "paginate",
    "prev_page",
]
