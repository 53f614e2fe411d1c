"""Strategy chart API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query

from api.schemas import InsuranceDecisionResponse
from core.strategy import BJA_H17_2019, should_take_insurance

router = APIRouter()


@router.get("/insurance")
async def insurance_decision(
    true_count: Annotated[int, Query(ge=-100, le=100)],
) -> InsuranceDecisionResponse:
    """Whether the chart takes insurance at a true count."""
    chart = BJA_H17_2019
    return InsuranceDecisionResponse(
        true_count=true_count,
        take_insurance=should_take_insurance(true_count, chart),
        tc_threshold=chart.insurance.tc_threshold,
        comparison=chart.insurance.comparison.value,
        chart_id=chart.metadata.id,
        chart_name=chart.metadata.chart_name,
        source_url=chart.metadata.source_url,
    )
