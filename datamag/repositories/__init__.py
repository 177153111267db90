"""Two interchangeable ledger backends: SQL and an in-memory DataFrame."""

from .frame_repository import FrameSalesRepository
from .sales_repository import SalesRepository

__all__ = [
    "FrameSalesRepository",
    "SalesRepository",
]
