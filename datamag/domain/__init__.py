"""
Domain models and rules of the period analytics engine.
Independent of the web and database layers.
"""

from .errors import AggregationError, PeriodParseError
from .filters import DataFilters
from .models import (
    AggregateResult,
    AnalyticsPayload,
    ChartPoint,
    ChartSeries,
    PeriodRange,
    SalesRecord,
)

__all__ = [
    "AggregateResult",
    "AggregationError",
    "AnalyticsPayload",
    "ChartPoint",
    "ChartSeries",
    "DataFilters",
    "PeriodParseError",
    "PeriodRange",
    "SalesRecord",
]
