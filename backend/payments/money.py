"""
Monetary precision helpers.

Key Principles:
1. NEVER use float for money
2. Quantize Decimals to the currency's minor unit before persisting
3. Round half-up (half a peso rounds away from zero), which is how bills
   are rounded at the table
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

# Currency minor unit exponents (how many decimal places)
CURRENCY_EXPONENT = {
    # Zero-decimal currencies
    "CLP": 0,  # Chilean Peso (no subunit)
    "JPY": 0,  # Japanese Yen (no subunit)
    "KRW": 0,  # South Korean Won (no subunit)

    # 2-decimal currencies
    "USD": 2,  # United States Dollar (cents)
    "EUR": 2,  # Euro (cents)
    "ARS": 2,  # Argentine Peso (centavos)
    "PEN": 2,  # Peruvian Sol (céntimos)
}

# Thousands separator used when formatting amounts for printed tickets
THOUSANDS_SEPARATOR = {
    "CLP": ".",
    "ARS": ".",
    "EUR": ".",
}


def currency_exponent(currency: str) -> int:
    """
    Get the number of decimal places for a currency.

    Examples:
        >>> currency_exponent("CLP")
        0
        >>> currency_exponent("USD")
        2
    """
    return CURRENCY_EXPONENT.get(currency.upper(), 2)


def quantize_decimal(currency: str) -> Decimal:
    """Smallest unit of a currency, e.g. Decimal('1') for CLP."""
    return Decimal(10) ** -currency_exponent(currency)


def quantize(currency: str, amount: Union[Decimal, str, int, float]) -> Decimal:
    """
    Round to currency decimals using ROUND_HALF_UP.

    Examples:
        >>> quantize("CLP", "2100.5")
        Decimal('2101')
        >>> quantize("CLP", "2100.49")
        Decimal('2100')
        >>> quantize("USD", "10.125")
        Decimal('10.13')
    """
    if isinstance(amount, float):
        # Convert float to string first to avoid precision issues
        amount = str(amount)

    amount_decimal = Decimal(amount)
    return amount_decimal.quantize(quantize_decimal(currency), rounding=ROUND_HALF_UP)


def format_amount(currency: str, amount: Union[Decimal, str, int]) -> str:
    """
    Human-readable amount for printed tickets.

    Examples:
        >>> format_amount("CLP", Decimal("23100"))
        '$23.100'
        >>> format_amount("USD", Decimal("1234.5"))
        '$1,234.50'
    """
    value = quantize(currency, amount)
    exponent = currency_exponent(currency)
    text = f"{value:,.{exponent}f}"
    separator = THOUSANDS_SEPARATOR.get(currency.upper())
    if separator == ".":
        text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"${text}"
