"""API routers module."""

from . import charts, health, sales

__all__ = [
    "charts",
    "health",
    "sales",
]
