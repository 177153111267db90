"""Aggregation of the sales ledger and the cached analytics/chart entry points."""

from .aggregator import SalesAggregator  # noqa: F401
from .analytics_service import AnalyticsService  # noqa: F401

__all__ = [
    "AnalyticsService",
    "SalesAggregator",
]
