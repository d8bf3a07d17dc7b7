"""
Plain read models handed out by ``orders.store.OrderStore``.

The grouping and totals code works on these instead of ORM instances so it
stays pure and can be exercised without a database.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional


@dataclass(frozen=True)
class AddOnRow:
    add_on_id: int
    name: str
    extra_price: Decimal


@dataclass(frozen=True)
class LineItemRow:
    item_id: int
    product_id: Optional[int]
    product_name: str
    quantity: int
    unit_price: Decimal
    note: str = ""
    add_ons: List[AddOnRow] = field(default_factory=list)
    channel: str = ""

    @property
    def unit_total(self) -> Decimal:
        """Unit price plus every attached add-on's extra price."""
        return self.unit_price + sum((a.extra_price for a in self.add_ons), Decimal("0"))

    @property
    def line_total(self) -> Decimal:
        return self.unit_total * self.quantity


@dataclass(frozen=True)
class OrderHeader:
    order_id: int
    number: int
    table_id: int
    table_number: int
    server_id: Optional[int]
    server_name: str
    status: str
    service_percentage: Optional[Decimal]
    created_at: datetime
