"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from domain.sale import SaleRecord
from domain.time import format_sale_date
from domain.views import ViewMode


# ============================================================================
# Sale Models
# ============================================================================

class SaleResponse(BaseModel):
    """Single sale record in API response."""
    id: str
    series_name: str
    country: str
    customer_name: str
    timestamp: int  # epoch milliseconds
    recorded_at: datetime
    recorded_on: str  # display date, e.g. "Jan 5, 2025"

    @classmethod
    def from_sale(cls, sale: SaleRecord) -> "SaleResponse":
        return cls(
            id=sale.id,
            series_name=sale.series_name,
            country=sale.country,
            customer_name=sale.customer_name,
            timestamp=sale.timestamp,
            recorded_at=sale.recorded_at,
            recorded_on=format_sale_date(sale.timestamp),
        )

    class Config:
        json_schema_extra = {
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "series_name": "HB851",
                "country": "Japan",
                "customer_name": "LLC Tech",
                "timestamp": 1735689600000,
                "recorded_at": "2025-01-01T00:00:00Z",
                "recorded_on": "Jan 1, 2025"
            }
        }


class RecordSaleRequest(BaseModel):
    """Request to record a sale from the entry form."""
    series_name: str = Field(default="", description="Selected product series")
    country: str = Field(
        default="",
        description='Selected country, or "OTHER" to use custom_country'
    )
    custom_country: Optional[str] = Field(
        default=None,
        description="Free-text country; when set, it replaces the selected country"
    )
    customer_name: str = Field(default="", description="Customer name or abbreviation")

    class Config:
        json_schema_extra = {
            "example": {
                "series_name": "HB851",
                "country": "Japan",
                "customer_name": "LLC Tech"
            }
        }


class RecordSaleResponse(BaseModel):
    """Response after a sale was recorded."""
    sale: SaleResponse
    message: str


class SaleFormOptionsResponse(BaseModel):
    """Choices offered by the record-sale form."""
    products: List[str]
    countries: List[str]
    other_country_option: str


class SaleHistoryResponse(BaseModel):
    """Response for history listing and search."""
    items: List[SaleResponse]
    total_count: int
    search: str

    class Config:
        json_schema_extra = {
            "example": {
                "items": [],
                "total_count": 12,
                "search": "llc"
            }
        }


# ============================================================================
# Explorer Models
# ============================================================================

class SelectionOptionsResponse(BaseModel):
    """Items that can be selected in an explorer mode."""
    mode: ViewMode
    items: List[str]


class CrossReferenceResponse(BaseModel):
    """Cross-reference result for one selected country or series."""
    mode: ViewMode
    selected: str
    results: List[str]
    total_count: int

    class Config:
        json_schema_extra = {
            "example": {
                "mode": "BY_COUNTRY",
                "selected": "Japan",
                "results": ["HB851", "HB900"],
                "total_count": 2
            }
        }


# ============================================================================
# Product Models
# ============================================================================

class ProductListResponse(BaseModel):
    products: List[str]
    total_count: int


class ProductImportRequest(BaseModel):
    """Bulk product import text."""
    text: str = Field(
        ...,
        description="Series names separated by newlines, commas, semicolons or pipes"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "text": "HB851\nHB852, HB853|HB854"
            }
        }


class ProductImportResponse(BaseModel):
    parsed: int
    added: int
    total: int


# ============================================================================
# Insight Models
# ============================================================================

class InsightResponse(BaseModel):
    """AI-generated sales report (or a fixed explanatory message)."""
    report: str


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None
    status_code: int

    class Config:
        json_schema_extra = {
            "example": {
                "error": "Invalid request",
                "detail": "Please select both a series and a country.",
                "status_code": 422
            }
        }
