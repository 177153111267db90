"""
Chart data normalization.

Chart inputs arrive from the assistant in whatever shape it produced: values as
numbers or as strings like ``"1,200 units"``, names missing, or no data at all.
``normalize`` turns any of that into a ChartSeries the renderer can always draw.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Sequence

from datamag.domain.models import ChartKind, ChartPoint, ChartSeries

CHART_KINDS: tuple[ChartKind, ...] = ("bar", "line", "pie")
DEFAULT_CHART_KIND: ChartKind = "bar"

# (keywords, kind), first match on the lower-cased title wins
TYPE_RULES: tuple[tuple[tuple[str, ...], ChartKind], ...] = (
    (("region", "breakdown", "distribution", "share"), "pie"),
    (("growth", "trend", "timeline", "year"), "line"),
    (("category", "product", "top", "sales", "performance"), "bar"),
)

FALLBACK_RULES: tuple[tuple[tuple[str, ...], tuple[tuple[str, float], ...]], ...] = (
    (
        ("region",),
        (("North", 847000), ("South", 423000), ("East", 512000), ("West", 318000)),
    ),
    (
        ("category", "product"),
        (("Electronics", 1240000), ("Clothing", 520000), ("Food", 180000), ("Home", 460000)),
    ),
    (
        ("growth", "trend", "year"),
        (("2022", 800000), ("2023", 1200000), ("2024", 1850000)),
    ),
)
DEFAULT_FALLBACK: tuple[tuple[str, float], ...] = (
    ("Q1", 420000),
    ("Q2", 510000),
    ("Q3", 580000),
    ("Q4", 690000),
)

_NON_NUMERIC = re.compile(r"[^0-9.\-]")


def _match(title: str, keywords: Iterable[str]) -> bool:
    return any(keyword in title for keyword in keywords)


def infer_chart_type(title: str) -> ChartKind:
    lowered = (title or "").lower()
    for keywords, kind in TYPE_RULES:
        if _match(lowered, keywords):
            return kind
    return DEFAULT_CHART_KIND


def coerce_value(raw: Any) -> float:
    """Numeric value of *raw*, or 0.0 when it cannot be read as a finite number."""
    if isinstance(raw, bool):
        return 0.0
    if isinstance(raw, str):
        raw = _NON_NUMERIC.sub("", raw)
    elif not isinstance(raw, (int, float, Decimal)):
        return 0.0
    try:
        value = float(raw)
    except (OverflowError, ValueError):
        # also oversized ints and signaling NaN
        return 0.0
    return value if math.isfinite(value) else 0.0


def coerce_name(raw: Any) -> str:
    return "" if raw is None else str(raw)


def to_points(
    data: Optional[Sequence[Any]],
    name_key: str = "name",
    value_key: str = "value",
) -> list[ChartPoint]:
    points = []
    for record in data or ():
        if not isinstance(record, Mapping):
            record = {}
        points.append(
            ChartPoint(
                name=coerce_name(record.get(name_key)),
                value=coerce_value(record.get(value_key)),
            )
        )
    return points


def is_unusable(points: Sequence[ChartPoint]) -> bool:
    return not points or all(point.value == 0 for point in points)


def fallback_points(title: str) -> list[ChartPoint]:
    lowered = (title or "").lower()
    for keywords, dataset in FALLBACK_RULES:
        if _match(lowered, keywords):
            return [ChartPoint(name=name, value=float(value)) for name, value in dataset]
    return [ChartPoint(name=name, value=float(value)) for name, value in DEFAULT_FALLBACK]


def normalize(
    data: Optional[Sequence[Any]],
    title: str,
    chart_type: Optional[ChartKind] = None,
    name_key: str = "name",
    value_key: str = "value",
) -> ChartSeries:
    """
    Build a renderable series from arbitrary chart input.

    The explicit *chart_type* wins over the one inferred from *title*. When the
    input has no records, or every value is zero, a fixed placeholder dataset
    chosen from the title replaces it and ``is_fallback`` is set.
    """
    kind = chart_type or infer_chart_type(title)
    points = to_points(data, name_key=name_key, value_key=value_key)

    if is_unusable(points):
        return ChartSeries(type=kind, points=tuple(fallback_points(title)), is_fallback=True)
    return ChartSeries(type=kind, points=tuple(points))
