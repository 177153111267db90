"""Repository protocol definitions used by domain services."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Protocol

from datamag.domain.filters import DataFilters
from datamag.domain.models import Dimension


class SalesLedgerProtocol(Protocol):
    """Contract for the sales ledger store."""

    def get_totals(self, filters: DataFilters) -> tuple[Decimal, int]:
        """Revenue sum and record count inside the filters."""
        ...

    def get_revenue_by(self, filters: DataFilters, dimension: Dimension) -> list[tuple[str, Decimal]]:
        """Revenue sums grouped by *dimension*, largest first."""
        ...

    def health_check(self) -> Dict[str, Any]: ...
