"""Sales analytics endpoints consumed by the assistant tools."""

from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel

from datamag.core.cache import etag_json
from datamag.core.config import Settings
from datamag.services.analytics_service import AnalyticsService
from datamag.services.dependencies import get_analytics_service, get_app_settings


router = APIRouter(prefix="/api/sales", tags=["sales"])


# -----------------------------------------------------------------------------
# Response Models
# -----------------------------------------------------------------------------


class AnalyticsResponse(BaseModel):
    """Period analytics payload."""
    period: str
    revenue: float
    revenueFormatted: str
    growth: float
    growthFormatted: str
    orders: int
    topCategory: str
    topRegion: str
    topRegionShare: str
    insight: str


class ChartPointRow(BaseModel):
    name: str
    value: float


class ChartSeriesResponse(BaseModel):
    """Normalized chart series."""
    type: Literal["bar", "line", "pie"]
    isFallback: bool
    data: list[ChartPointRow]


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


@router.get("", response_model=AnalyticsResponse)
async def get_sales_analytics(
    request: Request,
    period: Optional[str] = Query(None, description="Fiscal period, e.g. '2024-25' or 'FY 2024-25'"),
    service: AnalyticsService = Depends(get_analytics_service),
    settings: Settings = Depends(get_app_settings),
):
    """Revenue, growth and leaders for a fiscal period."""
    payload = await service.get_analytics(period or settings.DEFAULT_PERIOD)
    return etag_json(request, payload.to_dict(), max_age=settings.CACHE_MAX_AGE, swr=settings.CACHE_SWR)


@router.get("/chart-data", response_model=ChartSeriesResponse)
async def get_chart_data(
    request: Request,
    period: Optional[str] = Query(None, description="Fiscal period, e.g. '2024-25'"),
    chart_type: Literal["regional", "category", "growth"] = Query(
        ..., alias="chartType", description="Breakdown to chart"
    ),
    service: AnalyticsService = Depends(get_analytics_service),
    settings: Settings = Depends(get_app_settings),
):
    """Regional, category or growth breakdown of a period, ready to render."""
    series = await service.get_chart_data(period or settings.DEFAULT_PERIOD, chart_type)
    return etag_json(request, series.to_dict(), max_age=settings.CACHE_MAX_AGE, swr=settings.CACHE_SWR)
