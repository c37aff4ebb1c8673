"""
Explorer API Endpoints.

Cross-reference a country against the series sold there, or a series
against the countries it reached.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_store
from api.models import CrossReferenceResponse, SelectionOptionsResponse
from domain.views import ViewMode, cross_reference, selection_options
from services.record_store import RecordStore

router = APIRouter()


@router.get(
    "/explorer/options",
    response_model=SelectionOptionsResponse,
    summary="Selectable Items",
    description="Countries already sold to (BY_COUNTRY) or the product set (BY_SERIES)."
)
def get_selection_options(
    mode: ViewMode = Query(ViewMode.BY_COUNTRY),
    store: RecordStore = Depends(get_store),
):
    try:
        return SelectionOptionsResponse(
            mode=mode,
            items=selection_options(mode, store.sales, store.products),
        )

    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to list selectable items: {str(e)}"
        )


@router.get(
    "/explorer/cross-reference",
    response_model=CrossReferenceResponse,
    summary="Cross Reference",
    description="Series sold to a country, or countries a series was sold to."
)
def get_cross_reference(
    mode: ViewMode = Query(ViewMode.BY_COUNTRY),
    selected: str = Query("", description="Country (BY_COUNTRY) or series (BY_SERIES)"),
    store: RecordStore = Depends(get_store),
):
    """
    **Example:** `?mode=BY_COUNTRY&selected=Japan` returns every distinct
    series sold to Japan, sorted.
    """
    try:
        results = cross_reference(store.sales, mode, selected)
        return CrossReferenceResponse(
            mode=mode,
            selected=selected,
            results=results,
            total_count=len(results),
        )

    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to cross-reference sales: {str(e)}"
        )
