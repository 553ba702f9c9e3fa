"""
Utility functions for money arithmetic and response formatting.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional, Union
from tripsplit.core.config import settings

Number = Union[Decimal, int, str]

# Supported currencies (code -> name, symbol)
SUPPORTED_CURRENCIES = [
    {"code": "TWD", "name": "New Taiwan Dollar", "symbol": "NT$"},
    {"code": "USD", "name": "US Dollar", "symbol": "$"},
    {"code": "EUR", "name": "Euro", "symbol": "€"},
    {"code": "JPY", "name": "Japanese Yen", "symbol": "¥"},
    {"code": "KRW", "name": "South Korean Won", "symbol": "₩"},
    {"code": "CNY", "name": "Chinese Yuan", "symbol": "¥"},
    {"code": "HKD", "name": "Hong Kong Dollar", "symbol": "HK$"},
    {"code": "GBP", "name": "British Pound", "symbol": "£"},
    {"code": "THB", "name": "Thai Baht", "symbol": "฿"},
    {"code": "SGD", "name": "Singapore Dollar", "symbol": "S$"},
]

_CURRENCY_SYMBOLS = {c["code"]: c["symbol"] for c in SUPPORTED_CURRENCIES}


def minor_unit(precision: Optional[int] = None) -> Decimal:
    """Smallest currency unit, e.g. Decimal('0.01') for two decimal places."""
    if precision is None:
        precision = settings.CURRENCY_PRECISION
    return Decimal(1).scaleb(-precision)


def quantize_amount(amount: Number, precision: Optional[int] = None) -> Decimal:
    """Round an amount to currency precision (half up)."""
    return Decimal(amount).quantize(minor_unit(precision), rounding=ROUND_HALF_UP)


def has_currency_precision(amount: Number, precision: Optional[int] = None) -> bool:
    """True if the amount has no digits below the minor currency unit."""
    value = Decimal(amount)
    return value == value.quantize(minor_unit(precision))


def to_minor_units(amount: Number, precision: Optional[int] = None) -> int:
    """Convert a decimal amount into integer minor units (cents)."""
    return int(quantize_amount(amount, precision) / minor_unit(precision))


def from_minor_units(units: int, precision: Optional[int] = None) -> Decimal:
    """Convert integer minor units (cents) back into a decimal amount."""
    unit = minor_unit(precision)
    return (Decimal(units) * unit).quantize(unit)


def format_amount(amount: Number, currency: Optional[str] = None) -> str:
    """Format an amount for display, e.g. 'NT$1,234.50'."""
    currency = (currency or settings.DEFAULT_CURRENCY).upper()
    value = quantize_amount(amount)
    sign = "-" if value < 0 else ""
    symbol = _CURRENCY_SYMBOLS.get(currency)
    if symbol:
        return f"{sign}{symbol}{abs(value):,}"
    return f"{sign}{currency} {abs(value):,}"


def format_error(message: str, details: Any = None) -> Dict[str, Any]:
    """Format error response."""
    response = {"error": message}
    if details:
        response["details"] = details
    return response
