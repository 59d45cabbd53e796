"""Data aggregators for combining multiple domains."""

from lifeintel.aggregators.dashboard import (
    DashboardAggregator,
    DashboardData,
    WindowAverages,
    get_dashboard,
)

__all__ = [
    "DashboardAggregator",
    "DashboardData",
    "WindowAverages",
    "get_dashboard",
]
