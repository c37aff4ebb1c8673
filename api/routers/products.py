"""
Products API Endpoints.

Endpoints for listing, bulk importing and clearing product series.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from api.dependencies import get_store
from api.models import (
    ErrorResponse,
    ProductImportRequest,
    ProductImportResponse,
    ProductListResponse,
)
from repositories.storage import PersistenceError
from services.product_import_service import import_product_text
from services.record_store import RecordStore

router = APIRouter()


@router.get(
    "/products",
    response_model=ProductListResponse,
    summary="List Products",
)
def list_products(store: RecordStore = Depends(get_store)):
    try:
        products = store.products
        return ProductListResponse(
            products=list(products),
            total_count=len(products),
        )

    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to list products: {str(e)}"
        )


@router.post(
    "/products/import",
    response_model=ProductImportResponse,
    responses={500: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    summary="Import Products",
    description="Merge pasted series names into the product set (deduplicated, sorted)."
)
def import_products(request: ProductImportRequest, store: RecordStore = Depends(get_store)):
    """
    Import product series from free text.

    Names may be separated by newlines, commas, semicolons or pipes.
    Whitespace-only text imports nothing.

    **Example request:**
    ```json
    {"text": "HB851, HB852;HB853|HB851"}
    ```
    """
    try:
        result = import_product_text(store, request.text)
    except PersistenceError as e:
        raise HTTPException(
            status_code=503,
            detail=f"Products were not saved: {str(e)}"
        )
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to import products: {str(e)}"
        )

    return ProductImportResponse(parsed=result.parsed, added=result.added, total=result.total)


@router.delete(
    "/products",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    summary="Clear Products",
    description="Remove every product series. Sale records are kept. Requires confirm=true."
)
def clear_products(
    confirm: bool = Query(False, description="Must be true to clear"),
    store: RecordStore = Depends(get_store),
):
    if not confirm:
        raise HTTPException(
            status_code=400,
            detail="Clearing all products requires confirmation (confirm=true)"
        )

    try:
        store.clear_products()
    except PersistenceError as e:
        raise HTTPException(
            status_code=503,
            detail=f"Products were not cleared: {str(e)}"
        )
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to clear products: {str(e)}"
        )

    return Response(status_code=status.HTTP_204_NO_CONTENT)
