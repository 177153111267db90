"""Turns a pair of period aggregates into the analytics payload."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from datamag.domain.models import AggregateResult, AnalyticsPayload

NOT_AVAILABLE = "N/A"

# Evaluated top to bottom; the first threshold strictly exceeded wins.
INSIGHT_TIERS: tuple[tuple[float, str], ...] = (
    (30.0, "Record-breaking {growth}% growth!"),
    (15.0, "Massive {growth}% revenue surge"),
)
DEFAULT_INSIGHT = "Steady {growth}% growth maintained"

_ONE_DECIMAL = Decimal("0.1")
_MILLION = Decimal(1_000_000)


def growth_percentage(current: Decimal, previous: Decimal) -> float:
    """Year-over-year growth rounded to one decimal; 0 when there is no baseline."""
    if previous == 0:
        return 0.0
    rate = (Decimal(current) - Decimal(previous)) / Decimal(previous) * 100
    return float(rate.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def share_percentage(part: Decimal, total: Decimal) -> int:
    if total == 0:
        return 0
    return int((Decimal(part) / Decimal(total) * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def format_millions(amount: Decimal) -> str:
    millions = (Decimal(amount) / _MILLION).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP)
    return f"${millions}M"


def format_growth(growth: float) -> str:
    return f"{growth:+.1f}%"


def insight_for(growth: float) -> str:
    text = f"{growth:.1f}"
    for threshold, template in INSIGHT_TIERS:
        if growth > threshold:
            return template.format(growth=text)
    return DEFAULT_INSIGHT.format(growth=text)


def compose(current: AggregateResult, previous: AggregateResult, period: str) -> AnalyticsPayload:
    growth = growth_percentage(current.total_revenue, previous.total_revenue)
    top_category = current.top_category
    top_region = current.top_region
    region_share = share_percentage(top_region.revenue, current.total_revenue) if top_region else 0

    return AnalyticsPayload(
        period=period,
        revenue=float(current.total_revenue),
        revenue_formatted=format_millions(current.total_revenue),
        growth=growth,
        growth_formatted=format_growth(growth),
        orders=current.order_count,
        top_category=top_category.name if top_category else NOT_AVAILABLE,
        top_region=top_region.name if top_region else NOT_AVAILABLE,
        top_region_share=f"{region_share}%",
        insight=insight_for(growth),
    )
