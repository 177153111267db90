"""
Sales aggregation over a fiscal period.

The ledger queries of a period do not depend on each other, so they are
fanned out to the executor and gathered; latency is bounded by the slowest
query instead of their sum.
"""

from __future__ import annotations

import asyncio
from decimal import Decimal
from functools import partial
from typing import Callable, TypeVar

from datamag.core.logging import analytics_logger
from datamag.domain.errors import AggregationError
from datamag.domain.filters import DataFilters
from datamag.domain.models import AggregateResult, PeriodRange
from datamag.domain.periods import previous
from datamag.repositories.protocols import SalesLedgerProtocol

T = TypeVar("T")


class SalesAggregator:
    """Computes AggregateResults from a ledger repository."""

    def __init__(self, repository: SalesLedgerProtocol):
        self.repository = repository

    async def _run(self, fn: Callable[[], T]) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, fn)

    async def _gather(self, period_range: PeriodRange, *calls: Callable[[], T]) -> list[T]:
        try:
            return await asyncio.gather(*(self._run(call) for call in calls))
        except Exception as exc:
            analytics_logger.error(
                "Ledger aggregation failed",
                exc=exc,
                start=period_range.start.isoformat(),
                end=period_range.end.isoformat(),
            )
            raise AggregationError(
                "Failed to aggregate sales ledger",
                {"start": period_range.start.isoformat(), "end": period_range.end.isoformat()},
            ) from exc

    async def aggregate(self, period_range: PeriodRange) -> AggregateResult:
        filters = DataFilters.for_range(period_range)
        totals, by_category, by_region = await self._gather(
            period_range,
            partial(self.repository.get_totals, filters),
            partial(self.repository.get_revenue_by, filters, "category"),
            partial(self.repository.get_revenue_by, filters, "region"),
        )
        total_revenue, order_count = totals
        return AggregateResult(
            total_revenue=total_revenue,
            order_count=order_count,
            by_category=_sum_groups(by_category),
            by_region=_sum_groups(by_region),
        )

    async def aggregate_totals(self, period_range: PeriodRange) -> AggregateResult:
        """Totals only; the group breakdowns are left empty."""
        filters = DataFilters.for_range(period_range)
        (totals,) = await self._gather(period_range, partial(self.repository.get_totals, filters))
        total_revenue, order_count = totals
        return AggregateResult(total_revenue=total_revenue, order_count=order_count)

    async def aggregate_pair(self, period_range: PeriodRange) -> tuple[AggregateResult, AggregateResult]:
        """Aggregate a period and its previous fiscal year together."""
        current, prior = await asyncio.gather(
            self.aggregate(period_range),
            self.aggregate_totals(previous(period_range)),
        )
        return current, prior


def _sum_groups(rows: list[tuple[str, Decimal]]) -> dict[str, Decimal]:
    groups: dict[str, Decimal] = {}
    for name, revenue in rows:
        groups[name] = groups.get(name, Decimal(0)) + revenue
    return groups
