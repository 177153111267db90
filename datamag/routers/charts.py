"""Chart input normalization endpoint."""

from __future__ import annotations

from typing import Any, List, Literal, Optional

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from datamag.domain.charts import normalize
from datamag.routers.sales import ChartSeriesResponse

router = APIRouter(prefix="/api/charts", tags=["charts"])


class ChartNormalizeRequest(BaseModel):
    """Raw chart props as produced by the assistant."""
    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    type: Optional[Literal["bar", "line", "pie"]] = None
    data: Optional[List[Any]] = None
    name_key: str = Field("name", alias="nameKey")
    value_key: str = Field("value", alias="valueKey")


@router.post("/normalize", response_model=ChartSeriesResponse)
def normalize_chart(body: ChartNormalizeRequest) -> dict:
    """Coerce chart data into a renderable series, substituting a placeholder when empty."""
    series = normalize(
        body.data,
        body.title,
        chart_type=body.type,
        name_key=body.name_key,
        value_key=body.value_key,
    )
    return series.to_dict()
