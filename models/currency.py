"""
Currency schemas.
"""

from pydantic import Field
from decimal import Decimal

from models.base import BaseSchema


class CurrencyRate(BaseSchema):
    """Fixed rate against USD."""

    currency: str = Field(..., pattern="^[A-Z]{3}$")
    rate: Decimal = Field(..., gt=0, description="Units of this currency per 1 USD")
    symbol: str
    flag: str = ""


class CurrencyConversion(BaseSchema):
    """Result of converting an amount between two currencies."""

    amount: Decimal
    from_currency: str
    to_currency: str
    converted_amount: Decimal
    formatted: str
