"""
Sales API Endpoints.

Endpoints for recording sales, browsing and searching the history, and
deleting individual records.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from api.dependencies import get_store
from api.models import (
    ErrorResponse,
    RecordSaleRequest,
    RecordSaleResponse,
    SaleFormOptionsResponse,
    SaleHistoryResponse,
    SaleResponse,
)
from domain.countries import COMMON_COUNTRIES, OTHER_COUNTRY
from domain.views import search_history
from repositories.storage import PersistenceError
from services.record_store import RecordStore
from services.sale_entry_service import SaleEntryWorkflow

router = APIRouter()


@router.get(
    "/sales/form-options",
    response_model=SaleFormOptionsResponse,
    summary="Record Form Options",
    description="Product series and suggested countries for the record-sale form."
)
def get_form_options(store: RecordStore = Depends(get_store)):
    try:
        return SaleFormOptionsResponse(
            products=list(store.products),
            countries=list(COMMON_COUNTRIES),
            other_country_option=OTHER_COUNTRY,
        )

    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to load form options: {str(e)}"
        )


@router.post(
    "/sales",
    response_model=RecordSaleResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    summary="Record Sale",
    description="Validate the record-sale form and store a new sale."
)
def record_sale(request: RecordSaleRequest, store: RecordStore = Depends(get_store)):
    """
    Record a sale of a product series to a country for a customer.

    **Country resolution:**
    - `country` is one of the suggested countries (or any other string)
    - `country: "OTHER"` or a non-null `custom_country` switches to the
      free-text country, which is trimmed before use

    **Validation failures** return 422 with the form message, e.g.
    `"Please select both a series and a country."`
    """
    try:
        workflow = SaleEntryWorkflow(store)
        workflow.form.selected_series = request.series_name
        workflow.form.customer_name = request.customer_name
        workflow.choose_country(request.country)
        if request.custom_country is not None:
            workflow.choose_country(OTHER_COUNTRY)
            workflow.form.custom_country = request.custom_country

        try:
            result = workflow.submit()
        except PersistenceError as e:
            raise HTTPException(
                status_code=503,
                detail=f"Sale was not saved: {str(e)}"
            )

        if not result.success or result.sale is None:
            raise HTTPException(status_code=422, detail=result.notification.message)

        return RecordSaleResponse(
            sale=SaleResponse.from_sale(result.sale),
            message=result.notification.message,
        )

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to record sale: {str(e)}"
        )


@router.get(
    "/sales",
    response_model=SaleHistoryResponse,
    responses={500: {"model": ErrorResponse}},
    summary="Sales History",
    description="All sale records, most recent first, optionally filtered by a search term."
)
def list_sales(
    search: str = Query("", description="Case-insensitive match on series, country or customer"),
    store: RecordStore = Depends(get_store),
):
    try:
        matches = search_history(store.sales, search)
        return SaleHistoryResponse(
            items=[SaleResponse.from_sale(sale) for sale in matches],
            total_count=len(matches),
            search=search,
        )

    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to list sales: {str(e)}"
        )


@router.delete(
    "/sales/{sale_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    summary="Delete Sale",
    description="Delete one sale record. Requires confirm=true; unknown ids are ignored."
)
def delete_sale(
    sale_id: str,
    confirm: bool = Query(False, description="Must be true to delete"),
    store: RecordStore = Depends(get_store),
):
    if not confirm:
        raise HTTPException(
            status_code=400,
            detail="Deleting a record requires confirmation (confirm=true)"
        )

    try:
        store.delete_sale(sale_id)
    except PersistenceError as e:
        raise HTTPException(
            status_code=503,
            detail=f"Sale was not deleted: {str(e)}"
        )
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to delete sale: {str(e)}"
        )

    return Response(status_code=status.HTTP_204_NO_CONTENT)
