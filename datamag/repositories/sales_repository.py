"""
Sales ledger repository backed by SQL.
All SQL touching the ``sales`` table lives here.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy.engine import Engine

from datamag.core.config import settings
from datamag.domain.filters import DataFilters
from datamag.domain.models import Dimension
from datamag.infra import db

# whitelisted group-by columns; never interpolate caller input
_DIMENSION_COLUMNS: Dict[str, str] = {
    "category": "s.category",
    "region": "s.region",
}


def _decimal(value: Any) -> Decimal:
    return Decimal(str(value or 0))


class SalesRepository:
    """
    Ledger access over a SQLAlchemy engine.

    Expects a ``sales`` table with ``date``, ``region``, ``category``,
    ``product``, ``quantity``, ``revenue`` and ``cost`` columns.
    """

    def __init__(self, engine: Optional[Engine] = None, timeout_ms: Optional[int] = None):
        self.engine = engine
        self.timeout_ms = settings.QUERY_TIMEOUT_MS if timeout_ms is None else timeout_ms

    def get_totals(self, filters: DataFilters) -> tuple[Decimal, int]:
        """
        Revenue sum and order count for the filtered period.

        Args:
            filters: Inclusive date bounds

        Returns:
            ``(total_revenue, order_count)``; zeros when nothing matches
        """
        base_query = """
            SELECT
                COUNT(*) AS order_count,
                COALESCE(SUM(s.revenue), 0) AS total_revenue
            FROM sales s
        """
        query, params = filters.apply_to_query(base_query)
        row = db.fetch_one(query, params, timeout_ms=self.timeout_ms, engine=self.engine)

        if not row:
            return Decimal(0), 0
        return _decimal(row["total_revenue"]), int(row["order_count"])

    def get_revenue_by(self, filters: DataFilters, dimension: Dimension) -> list[tuple[str, Decimal]]:
        """
        Revenue grouped by category or region, largest first.

        Raises:
            ValueError: unknown dimension
        """
        column = _DIMENSION_COLUMNS.get(dimension)
        if column is None:
            raise ValueError(f"Unsupported dimension: {dimension}")

        base_query = f"""
            SELECT
                {column} AS group_name,
                COALESCE(SUM(s.revenue), 0) AS total_revenue
            FROM sales s
        """
        query, params = filters.apply_to_query(base_query)
        query += f" GROUP BY {column} ORDER BY total_revenue DESC"

        rows = db.fetch_all(query, params, timeout_ms=self.timeout_ms, engine=self.engine)
        return [(row["group_name"] or "", _decimal(row["total_revenue"])) for row in rows]

    def health_check(self) -> Dict[str, Any]:
        return db.health_check(self.engine)
