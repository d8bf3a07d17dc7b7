"""
Order financial calculator.

Pure functions over line item rows: no database access, so the same code
computes persisted totals, bill tickets and API previews.

    subtotal       = Σ quantity × unit_price + Σ quantity × add-on extra price
    service_charge = round_half_up(subtotal × percentage / 100)
    total          = subtotal + service_charge

Usage:
    from orders.calculators import OrderCalculator
    totals = OrderCalculator(rows, percentage).calculate_totals()
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, Optional

from django.conf import settings

from payments.money import quantize

from .exceptions import OrderValidationError
from .records import LineItemRow


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    percentage: Decimal
    service_charge: Decimal
    total: Decimal

    def to_dict(self) -> Dict[str, str]:
        return {
            "subtotal": str(self.subtotal),
            "service_percentage": format(self.percentage.normalize(), "f"),
            "service_charge": str(self.service_charge),
            "total": str(self.total),
        }


def default_percentage() -> Decimal:
    return Decimal(str(getattr(settings, "DEFAULT_SERVICE_PERCENTAGE", 10)))


def validate_percentage(value) -> Decimal:
    """
    Coerce a service percentage to Decimal and check 0 <= value <= 100.
    Raises OrderValidationError for anything else.
    """
    if value is None or isinstance(value, bool):
        raise OrderValidationError("Service percentage is required")
    try:
        percentage = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise OrderValidationError(f"Service percentage '{value}' is not a number")
    if not percentage.is_finite():
        raise OrderValidationError(f"Service percentage '{value}' is not a number")
    if percentage < 0 or percentage > 100:
        raise OrderValidationError("Service percentage must be between 0 and 100")
    return percentage


class OrderCalculator:
    """
    Calculator for subtotal, service charge and grand total of a set of rows.

    ``percentage=None`` means the order never set one and the configured
    default applies.
    """

    def __init__(self, rows: Iterable[LineItemRow], percentage: Optional[Decimal] = None, currency: Optional[str] = None):
        self.rows = list(rows)
        self.percentage = default_percentage() if percentage is None else Decimal(percentage)
        self.currency = currency or getattr(settings, "CURRENCY", "CLP")

    def calculate_items_subtotal(self) -> Decimal:
        return sum((row.unit_price * row.quantity for row in self.rows), Decimal("0"))

    def calculate_add_ons_subtotal(self) -> Decimal:
        return sum(
            (addon.extra_price * row.quantity for row in self.rows for addon in row.add_ons),
            Decimal("0"),
        )

    def calculate_subtotal(self) -> Decimal:
        return quantize(
            self.currency, self.calculate_items_subtotal() + self.calculate_add_ons_subtotal()
        )

    def calculate_service_charge(self, subtotal: Decimal) -> Decimal:
        return quantize(self.currency, subtotal * self.percentage / Decimal("100"))

    def calculate_totals(self) -> OrderTotals:
        subtotal = self.calculate_subtotal()
        service_charge = self.calculate_service_charge(subtotal)
        return OrderTotals(
            subtotal=subtotal,
            percentage=self.percentage,
            service_charge=service_charge,
            total=subtotal + service_charge,
        )
