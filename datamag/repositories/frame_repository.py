"""In-memory sales ledger backed by a pandas DataFrame."""

from __future__ import annotations

from dataclasses import asdict
from decimal import Decimal
from typing import Any, Dict, Iterable

import pandas as pd

from datamag.domain.filters import DataFilters
from datamag.domain.models import Dimension, SalesRecord

LEDGER_COLUMNS = ["date", "region", "category", "product", "quantity", "revenue", "cost"]


def _decimal(value: Any) -> Decimal:
    return Decimal(str(round(float(value), 6)))


class FrameSalesRepository:
    """Ledger kept in a DataFrame; used for CSV exports and tests."""

    def __init__(self, frame: pd.DataFrame):
        missing = [c for c in LEDGER_COLUMNS if c not in frame.columns]
        if missing:
            raise ValueError(f"Ledger is missing columns: {', '.join(missing)}")

        frame = frame[LEDGER_COLUMNS].copy()
        frame["date"] = pd.to_datetime(frame["date"], format="ISO8601")
        frame["revenue"] = pd.to_numeric(frame["revenue"], errors="coerce").fillna(0.0)
        self._frame = frame

    @classmethod
    def from_csv(cls, path: str) -> FrameSalesRepository:
        return cls(pd.read_csv(path))

    @classmethod
    def from_records(cls, records: Iterable[SalesRecord]) -> FrameSalesRepository:
        rows = [
            {**asdict(r), "date": r.date.isoformat(), "revenue": float(r.revenue), "cost": float(r.cost)}
            for r in records
        ]
        return cls(pd.DataFrame(rows, columns=LEDGER_COLUMNS))

    def __len__(self) -> int:
        return len(self._frame)

    def _slice(self, filters: DataFilters) -> pd.DataFrame:
        start = pd.Timestamp(filters.start_date)
        end = pd.Timestamp(filters.end_exclusive)
        frame = self._frame
        return frame[(frame["date"] >= start) & (frame["date"] < end)]

    def get_totals(self, filters: DataFilters) -> tuple[Decimal, int]:
        sliced = self._slice(filters)
        return _decimal(sliced["revenue"].sum()), int(len(sliced))

    def get_revenue_by(self, filters: DataFilters, dimension: Dimension) -> list[tuple[str, Decimal]]:
        if dimension not in ("category", "region"):
            raise ValueError(f"Unsupported dimension: {dimension}")

        sliced = self._slice(filters)
        if sliced.empty:
            return []
        grouped = (
            sliced.groupby(dimension, sort=False)["revenue"]
            .sum()
            .sort_values(ascending=False, kind="stable")
        )
        return [(str(name), _decimal(total)) for name, total in grouped.items()]

    def health_check(self) -> Dict[str, Any]:
        return {"ok": True, "backend": "dataframe", "rows": len(self)}
