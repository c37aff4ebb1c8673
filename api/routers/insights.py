"""
Insights API Endpoints.

Endpoint for requesting an AI-written sales report.
"""

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_analysis_guard, get_requester, get_store
from api.models import ErrorResponse, InsightResponse
from services.analysis_service import (
    AnalysisInProgressError,
    AnalysisRequester,
    SingleFlightGuard,
)
from services.record_store import RecordStore

router = APIRouter()


@router.post(
    "/insights",
    response_model=InsightResponse,
    responses={409: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Generate AI Report",
    description="Summarize current sales and ask the AI service for a short report."
)
async def generate_insights(
    store: RecordStore = Depends(get_store),
    requester: AnalysisRequester = Depends(get_requester),
    guard: SingleFlightGuard = Depends(get_analysis_guard),
):
    """
    Generate a prose report from a snapshot of the current data.

    Missing credentials, an empty history and service failures all return
    200 with an explanatory message in `report`. Only one report is generated
    at a time; a request made while another is running gets 409.
    """
    sales = store.sales
    products = store.products

    try:
        async with guard:
            report = await requester.generate_report(sales, products)
    except AnalysisInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to generate report: {str(e)}"
        )

    return InsightResponse(report=report)
