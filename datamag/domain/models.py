"""
Domain models.
Plain dataclasses shared by the resolver, aggregator, composer and chart
normalizer; none of them depend on the web or database layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from types import MappingProxyType
from typing import Literal, Mapping, Optional

ChartKind = Literal["bar", "line", "pie"]
Dimension = Literal["category", "region"]


@dataclass(frozen=True)
class SalesRecord:
    """One ledger row. Owned by the store; read only here."""

    date: date
    region: str
    category: str
    product: str
    quantity: int
    revenue: Decimal
    cost: Decimal


@dataclass(frozen=True)
class PeriodRange:
    """Inclusive date interval of a fiscal period."""

    start: date
    end: date
    label: str = ""

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"PeriodRange start {self.start} is after end {self.end}")

    @property
    def start_year(self) -> int:
        return self.start.year

    @property
    def end_year(self) -> int:
        return self.end.year


@dataclass(frozen=True)
class GroupTotal:
    name: str
    revenue: Decimal


def _top(groups: Mapping[str, Decimal]) -> Optional[GroupTotal]:
    """Highest revenue group; equal sums resolve to the name that sorts first."""
    if not groups:
        return None
    name, revenue = min(groups.items(), key=lambda kv: (-kv[1], kv[0]))
    return GroupTotal(name=name, revenue=revenue)


@dataclass(frozen=True)
class AggregateResult:
    """Ledger summary for one PeriodRange."""

    total_revenue: Decimal
    order_count: int
    by_category: Mapping[str, Decimal] = field(default_factory=dict)
    by_region: Mapping[str, Decimal] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # freeze the mappings so a cached result cannot be altered by callers
        object.__setattr__(self, "by_category", MappingProxyType(dict(self.by_category)))
        object.__setattr__(self, "by_region", MappingProxyType(dict(self.by_region)))

    @classmethod
    def empty(cls) -> AggregateResult:
        return cls(total_revenue=Decimal(0), order_count=0)

    @property
    def top_category(self) -> Optional[GroupTotal]:
        return _top(self.by_category)

    @property
    def top_region(self) -> Optional[GroupTotal]:
        return _top(self.by_region)


@dataclass(frozen=True)
class AnalyticsPayload:
    """Externally visible analytics result, identified by its period string."""

    period: str
    revenue: float
    revenue_formatted: str
    growth: float
    growth_formatted: str
    orders: int
    top_category: str
    top_region: str
    top_region_share: str
    insight: str

    def to_dict(self) -> dict:
        return {
            "period": self.period,
            "revenue": self.revenue,
            "revenueFormatted": self.revenue_formatted,
            "growth": self.growth,
            "growthFormatted": self.growth_formatted,
            "orders": self.orders,
            "topCategory": self.top_category,
            "topRegion": self.top_region,
            "topRegionShare": self.top_region_share,
            "insight": self.insight,
        }


@dataclass(frozen=True)
class ChartPoint:
    name: str
    value: float

    def to_dict(self) -> dict:
        return {"name": self.name, "value": self.value}


@dataclass(frozen=True)
class ChartSeries:
    """Canonical, never-empty series handed to the chart renderer."""

    type: ChartKind
    points: tuple[ChartPoint, ...]
    is_fallback: bool = False

    def __len__(self) -> int:
        return len(self.points)

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "isFallback": self.is_fallback,
            "data": [p.to_dict() for p in self.points],
        }
