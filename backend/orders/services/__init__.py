"""
Orders services package - modular service layer for order management.

- OrderService: Order lifecycle (claim table, send, void, close)
- OrderCalculationService: Totals and service percentage
- OrderItemService: Item management (add, adjust, remove, notes, add-ons)
- KitchenService: Ticket building (bill and per-channel kitchen tickets)
- TicketEmissionService: Locked, per-channel printing and KDS mirroring
"""

# Core order operations
from .order_service import OrderService, ClaimResult

# Calculation operations
from .calculation_service import OrderCalculationService

# Item management
from .item_service import OrderItemService

# Ticket building
from .kitchen_service import KitchenService, TicketPayload, TicketLine

# Emission
from .emission_service import (
    TicketEmissionService,
    EmissionResult,
    ChannelResult,
    TRIGGER_MANUAL,
    TRIGGER_PAYMENT,
)

__all__ = [
    # Core
    'OrderService',
    'ClaimResult',
    # Calculations
    'OrderCalculationService',
    # Items
    'OrderItemService',
    # Kitchen
    'KitchenService',
    'TicketPayload',
    'TicketLine',
    # Emission
    'TicketEmissionService',
    'EmissionResult',
    'ChannelResult',
    'TRIGGER_MANUAL',
    'TRIGGER_PAYMENT',
]
