"""
Currency API routes.

Fixed-rate table and conversions for the country/currency switcher.
"""

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from decimal import Decimal
import structlog

from models.currency import CurrencyRate, CurrencyConversion
from services import currency_service
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter()


def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


@router.get("", response_model=list[CurrencyRate])
async def list_currencies():
    """Supported currencies with their rate per USD."""
    return currency_service.list_currencies()


@router.get("/convert", response_model=CurrencyConversion)
async def convert_currency(
    amount: Decimal = Query(...),
    from_currency: str = Query(..., min_length=3, max_length=3),
    to_currency: str = Query(..., min_length=3, max_length=3),
):
    """
    Convert an amount between currencies (through USD).

    Raises:
        422: Unsupported currency
    """
    try:
        return currency_service.convert_and_format(amount, from_currency, to_currency)

    except Exception as e:
        return handle_error(e)
