"""
Currency conversion and formatting.

Fixed-rate table keyed by currency code. Conversions go through USD:
amount / from_rate × to_rate.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
import structlog

from models.currency import CurrencyRate, CurrencyConversion
from exceptions import UnsupportedCurrencyError

logger = structlog.get_logger(__name__)


CURRENCIES = [
    CurrencyRate(currency="USD", rate=Decimal("1"), symbol="$", flag="🇺🇸"),
    CurrencyRate(currency="EUR", rate=Decimal("0.85"), symbol="€", flag="🇪🇺"),
    CurrencyRate(currency="ZAR", rate=Decimal("18.5"), symbol="R", flag="🇿🇦"),
    CurrencyRate(currency="GBP", rate=Decimal("0.73"), symbol="£", flag="🇬🇧"),
]

_BY_CODE = {c.currency: c for c in CURRENCIES}

CENTS = Decimal("0.01")


def list_currencies() -> list[CurrencyRate]:
    return list(CURRENCIES)


def get_currency(code: str) -> Optional[CurrencyRate]:
    """Look up a currency by code (case-insensitive)."""
    return _BY_CODE.get(code.upper())


def _require(code: str) -> CurrencyRate:
    currency = get_currency(code)
    if currency is None:
        raise UnsupportedCurrencyError(code, sorted(_BY_CODE))
    return currency


def convert(amount: Decimal, from_currency: str, to_currency: str) -> Decimal:
    """
    Convert an amount between currencies via USD.

    Same-currency conversion returns the amount untouched.

    Raises:
        UnsupportedCurrencyError: If either code is not in the table
    """
    source = _require(from_currency)
    target = _require(to_currency)

    if source.currency == target.currency:
        return amount

    usd_amount = amount / source.rate
    return usd_amount * target.rate


def format_amount(amount: Decimal, currency: str) -> str:
    """
    Symbol plus grouped, two-decimal amount.

    - (Decimal("1234.5"), "ZAR") → "R1,234.50"
    - Unknown currency → "1234.50"
    """
    rounded = Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)
    info = get_currency(currency)
    if info is None:
        return f"{rounded:.2f}"
    return f"{info.symbol}{rounded:,.2f}"


def convert_and_format(
    amount: Decimal,
    from_currency: str,
    to_currency: str,
) -> CurrencyConversion:
    """Convert an amount and render it in the target currency."""
    converted = convert(amount, from_currency, to_currency)
    rounded = converted.quantize(CENTS, rounding=ROUND_HALF_UP)

    logger.debug(
        "currency_converted",
        from_currency=from_currency.upper(),
        to_currency=to_currency.upper(),
        amount=float(amount),
        converted=float(rounded)
    )

    return CurrencyConversion(
        amount=amount,
        from_currency=from_currency.upper(),
        to_currency=to_currency.upper(),
        converted_amount=rounded,
        formatted=format_amount(rounded, to_currency),
    )
