"""
AI sales analysis service.

Builds a compact summary of the current sales and products, wraps it in an
analyst prompt and asks an external text-generation model for a short prose
report.

The requester never raises to its caller:
- no API key configured: MISSING_API_KEY_MESSAGE, no request made
- no sales recorded: NO_SALES_MESSAGE, no request made
- empty model output: EMPTY_RESPONSE_MESSAGE
- any failure of the external call: logged, SERVICE_ERROR_MESSAGE

There is no retry, no timeout beyond the client's own and no caching; each
call is a fresh request. Overlapping requests are the caller's concern; see
SingleFlightGuard.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from textwrap import dedent
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, List, Optional, Sequence

from domain.sale import SaleRecord
from domain.views import country_distribution, customer_activity

if TYPE_CHECKING:
    from config.settings import Settings

logger = logging.getLogger(__name__)

RECENT_SALES_LIMIT = 10

MISSING_API_KEY_MESSAGE = "API Key is missing. Please configure the environment to use AI insights."
NO_SALES_MESSAGE = "No sales data available yet. Please record some sales to generate insights."
EMPTY_RESPONSE_MESSAGE = "Could not generate analysis."
SERVICE_ERROR_MESSAGE = (
    "An error occurred while communicating with the AI service. Please try again later."
)

# Takes a prompt, returns the generated text (None or "" when the model returned nothing).
TextGenerator = Callable[[str], Awaitable[Optional[str]]]


class AnalysisInProgressError(RuntimeError):
    """Raised when an analysis is requested while another one is still running."""
    pass


@dataclass(frozen=True, slots=True)
class SalesSummary:
    """
    Token-friendly snapshot of the record set sent to the model.

    recent_sales holds the most recent records first, as
    'series -> country (customer)'.
    """
    total_products: int
    total_sales_recorded: int
    recent_sales: List[str]
    country_distribution: Dict[str, int]
    customer_activity: Dict[str, int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalProducts": self.total_products,
            "totalSalesRecorded": self.total_sales_recorded,
            "recentSales": list(self.recent_sales),
            "countryDistribution": dict(self.country_distribution),
            "customerActivity": dict(self.customer_activity),
        }


def build_sales_summary(sales: Sequence[SaleRecord], products: Sequence[str]) -> SalesSummary:
    """Summarize sales (most recent first) and products for the prompt."""

    return SalesSummary(
        total_products=len(products),
        total_sales_recorded=len(sales),
        recent_sales=[sale.describe() for sale in sales[:RECENT_SALES_LIMIT]],
        country_distribution=country_distribution(sales),
        customer_activity=customer_activity(sales),
    )


def build_analysis_prompt(summary: SalesSummary) -> str:
    data = json.dumps(summary.to_dict(), ensure_ascii=False)
    return dedent(
        """
        You are a senior business intelligence analyst.
        Analyze the following JSON summary of product sales data.

        Data: {data}

        Please provide:
        1. A brief executive summary of the sales distribution.
        2. Identification of the top-performing market and top customers.
        3. A strategic recommendation for expansion or focus based on the limited data.

        Keep the tone professional, encouraging, and concise (under 200 words).
        Format as plain text with clear paragraphs.
        """
    ).format(data=data).strip()


class OpenAITextGenerator:
    """Text generator backed by the OpenAI chat completions API."""

    def __init__(self, api_key: str, model: str) -> None:
        from openai import AsyncOpenAI

        self._client = AsyncOpenAI(api_key=api_key)
        self._model = model

    async def __call__(self, prompt: str) -> Optional[str]:
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=[{"role": "user", "content": prompt}],
        )
        if not response.choices:
            return None
        return response.choices[0].message.content


class AnalysisRequester:
    """
    Requests AI sales reports.

    Args:
        api_key: Credential for the analysis service; None or "" disables
            requests (a fixed message is returned instead).
        model: Model identifier passed to the default generator.
        generator: Optional text generator to use instead of OpenAI.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        generator: Optional[TextGenerator] = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._generator = generator

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnalysisRequester":
        return cls(api_key=settings.openai_api_key, model=settings.analysis_model)

    def _get_generator(self) -> TextGenerator:
        if self._generator is None:
            self._generator = OpenAITextGenerator(self._api_key or "", self._model)
        return self._generator

    async def generate_report(self, sales: Sequence[SaleRecord], products: Sequence[str]) -> str:
        """Return the prose report, or a fixed message explaining why there is none."""

        if not self._api_key:
            return MISSING_API_KEY_MESSAGE

        if not sales:
            return NO_SALES_MESSAGE

        prompt = build_analysis_prompt(build_sales_summary(sales, products))

        try:
            text = await self._get_generator()(prompt)
        except Exception:
            logger.exception("Sales analysis request failed (model=%s)", self._model)
            return SERVICE_ERROR_MESSAGE

        return text or EMPTY_RESPONSE_MESSAGE


class SingleFlightGuard:
    """
    Allows one analysis at a time.

    Usage:
        async with guard:
            report = await requester.generate_report(...)

    Entering while another holder is inside raises AnalysisInProgressError
    instead of waiting.
    """

    def __init__(self) -> None:
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    async def __aenter__(self) -> "SingleFlightGuard":
        if self._busy:
            raise AnalysisInProgressError("An analysis is already in progress")
        self._busy = True
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self._busy = False


__all__ = [
    "MISSING_API_KEY_MESSAGE",
    "NO_SALES_MESSAGE",
    "EMPTY_RESPONSE_MESSAGE",
    "SERVICE_ERROR_MESSAGE",
    "AnalysisInProgressError",
    "SalesSummary",
    "build_sales_summary",
    "build_analysis_prompt",
    "OpenAITextGenerator",
    "AnalysisRequester",
    "SingleFlightGuard",
]
