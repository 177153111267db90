"""Period analytics and chart data, served through the result cache."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Any, Literal, Mapping

from datamag.core.cache import ResultCache
from datamag.core.logging import analytics_logger
from datamag.domain import charts, metrics, periods
from datamag.domain.models import AnalyticsPayload, ChartSeries, PeriodRange
from datamag.services.aggregator import SalesAggregator

ChartRequestKind = Literal["regional", "category", "growth"]

CHART_TITLES: Mapping[str, str] = {
    "regional": "Regional Breakdown",
    "category": "Category Sales",
    "growth": "Growth Trend",
}

GROWTH_YEARS = 3


def _range_key(namespace: str, period_range: PeriodRange) -> str:
    return f"{namespace}:{period_range.start.isoformat()}:{period_range.end.isoformat()}"


def _ranked(groups: Mapping[str, Any]) -> list[dict]:
    ordered = sorted(groups.items(), key=lambda kv: (-kv[1], kv[0]))
    return [{"name": name, "value": float(revenue)} for name, revenue in ordered]


class AnalyticsService:
    """Entry point used by the routers: resolve, aggregate, compose, cache."""

    def __init__(self, aggregator: SalesAggregator, cache: ResultCache):
        self.aggregator = aggregator
        self.cache = cache

    async def get_analytics(self, period: str) -> AnalyticsPayload:
        """
        Analytics payload for a period string.

        Entries are shared by every spelling of the same fiscal range; the
        returned payload always carries the *period* string it was asked for.

        Raises:
            PeriodParseError: the period has no usable year
            AggregationError: the ledger store failed
        """
        period_range = periods.resolve(period)

        async def compute() -> AnalyticsPayload:
            current, prior = await self.aggregator.aggregate_pair(period_range)
            payload = metrics.compose(current, prior, period)
            analytics_logger.info(
                "Analytics computed",
                period=period,
                revenue=payload.revenue,
                growth=payload.growth,
            )
            return payload

        payload = await self.cache.get_or_compute(_range_key("analytics", period_range), compute)
        return payload if payload.period == period else replace(payload, period=period)

    async def get_chart_data(self, period: str, chart_kind: ChartRequestKind) -> ChartSeries:
        """
        Chart series for one breakdown of a period.

        Regional and category splits come from the ledger grouped by that
        dimension; growth compares the totals of the last three fiscal years.
        """
        if chart_kind not in CHART_TITLES:
            raise ValueError(f"Unsupported chart kind: {chart_kind}")
        period_range = periods.resolve(period)
        # every range is resolved before the first ledger query
        growth_ranges = (
            [periods.previous(period_range, years) for years in range(GROWTH_YEARS - 1, -1, -1)]
            if chart_kind == "growth"
            else []
        )

        async def compute() -> ChartSeries:
            if growth_ranges:
                records = await self._growth_records(growth_ranges)
            else:
                records = await self._split_records(period_range, chart_kind)
            return charts.normalize(records, CHART_TITLES[chart_kind])

        return await self.cache.get_or_compute(_range_key(f"chart:{chart_kind}", period_range), compute)

    async def _growth_records(self, ranges: list[PeriodRange]) -> list[dict]:
        totals = await asyncio.gather(*(self.aggregator.aggregate_totals(r) for r in ranges))
        return [
            {"name": str(r.start_year), "value": float(result.total_revenue)}
            for r, result in zip(ranges, totals)
        ]

    async def _split_records(self, period_range: PeriodRange, chart_kind: str) -> list[dict]:
        aggregate = await self.aggregator.aggregate(period_range)
        groups = aggregate.by_region if chart_kind == "regional" else aggregate.by_category
        return _ranked(groups)
