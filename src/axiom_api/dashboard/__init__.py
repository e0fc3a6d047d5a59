"""Client-side data layer for the feedback dashboard."""

from axiom_api.dashboard.client import DashboardError, FeedbackApiClient
from axiom_api.dashboard.filters import FilterState, FilterStorage
from axiom_api.dashboard.state import DeleteConfirmation, FeedbackDashboard

__all__ = [
    "DashboardError",
    "DeleteConfirmation",
    "FeedbackApiClient",
    "FeedbackDashboard",
    "FilterState",
    "FilterStorage",
]
