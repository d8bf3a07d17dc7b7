"""
Shared test fixtures for all backend tests.

This module provides reusable pytest fixtures for common test objects:
staff users, tables, printers, kitchen zones and a small menu.

Menu routing:
- Burger (5000) -> Cocina, allows cheese (+500) and fries (+1500)
- Lomo (12000) -> Parrilla
- Limonada (2000) -> no zone, routed to the default GENERAL channel
"""
import pytest
from decimal import Decimal

from users.models import User
from products.models import AddOn, Category, Product
from orders.models import Table
from settings.models import KitchenZone, Printer


# ============================================================================
# USER FIXTURES
# ============================================================================

@pytest.fixture
def waiter(db):
    """Server who claims tables and takes orders"""
    return User.objects.create_user(
        username='waiter',
        password='test123',
        role=User.Role.WAITER,
        full_name='Camila Rojas',
    )


@pytest.fixture
def other_waiter(db):
    return User.objects.create_user(
        username='waiter2',
        password='test123',
        role=User.Role.WAITER,
        full_name='Diego Soto',
    )


@pytest.fixture
def cashier(db):
    return User.objects.create_user(
        username='cashier',
        password='test123',
        role=User.Role.CASHIER,
        full_name='Valentina Muñoz',
    )


@pytest.fixture
def waiter_client(api_client, waiter):
    """API client authenticated as the waiter"""
    api_client.force_authenticate(user=waiter)
    return api_client


@pytest.fixture
def cashier_client(api_client, cashier):
    api_client.force_authenticate(user=cashier)
    return api_client


# ============================================================================
# TABLE FIXTURES
# ============================================================================

@pytest.fixture
def table(db):
    return Table.objects.create(number=1)


@pytest.fixture
def table_2(db):
    return Table.objects.create(number=2)


# ============================================================================
# PRINT ROUTING FIXTURES
# ============================================================================

@pytest.fixture
def bill_printer(db):
    """Cashier printer, matches the BILL_PRINTER setting"""
    return Printer.objects.create(name='XPrinter 80mm', printer_type='receipt')


@pytest.fixture
def kitchen_printer(db):
    return Printer.objects.create(name='Cocina 80mm', printer_type='kitchen')


@pytest.fixture
def grill_printer(db):
    return Printer.objects.create(name='Parrilla 80mm', printer_type='kitchen')


@pytest.fixture
def kitchen_zone(kitchen_printer):
    return KitchenZone.objects.create(name='Cocina', printer=kitchen_printer)


@pytest.fixture
def grill_zone(grill_printer):
    return KitchenZone.objects.create(name='Parrilla', printer=grill_printer)


@pytest.fixture
def printers(bill_printer, kitchen_zone, grill_zone):
    """Every printer and zone configured"""
    return {
        'bill': bill_printer,
        'COCINA': kitchen_zone.printer,
        'PARRILLA': grill_zone.printer,
    }


# ============================================================================
# MENU FIXTURES
# ============================================================================

@pytest.fixture
def mains_category(kitchen_zone):
    return Category.objects.create(name='Fondos', kitchen_zone=kitchen_zone)


@pytest.fixture
def grill_category(grill_zone):
    return Category.objects.create(name='Parrilla', kitchen_zone=grill_zone)


@pytest.fixture
def drinks_category(db):
    return Category.objects.create(name='Bebidas')


@pytest.fixture
def cheese(db):
    return AddOn.objects.create(name='Queso', extra_price=Decimal('500'))


@pytest.fixture
def fries(db):
    return AddOn.objects.create(name='Papas fritas', extra_price=Decimal('1500'))


@pytest.fixture
def burger(mains_category, cheese, fries):
    product = Product.objects.create(
        name='Burger', price=Decimal('5000'), category=mains_category
    )
    product.allowed_add_ons.add(cheese, fries)
    return product


@pytest.fixture
def steak(grill_category):
    return Product.objects.create(
        name='Lomo a lo pobre', price=Decimal('12000'), category=grill_category
    )


@pytest.fixture
def lemonade(drinks_category):
    return Product.objects.create(
        name='Limonada', price=Decimal('2000'), category=drinks_category
    )


# ============================================================================
# ORDER FIXTURES
# ============================================================================

@pytest.fixture
def open_order(table, waiter):
    """Active order created by the waiter claiming table 1"""
    from orders.services import OrderService

    return OrderService.claim_table(table.pk, waiter).order


@pytest.fixture
def worked_example_order(open_order, burger, cheese):
    """
    Two "Burger + cheese" items of quantity 1 and one "Burger, no onions"
    of quantity 2, at the default 10% service.
    Expected: subtotal 21000, service charge 2100, total 23100.
    """
    from orders.services import OrderItemService

    OrderItemService.add_product(open_order.pk, burger.pk, add_on_ids=[cheese.pk])
    OrderItemService.add_product(open_order.pk, burger.pk, add_on_ids=[cheese.pk])
    OrderItemService.add_product(open_order.pk, burger.pk, note='no onions')
    no_onions = open_order.items.get(note='no onions')
    OrderItemService.increment(no_onions.pk)
    return open_order


@pytest.fixture
def no_lock_cooldown(settings):
    """Release emission locks immediately so consecutive emissions are not absorbed"""
    settings.EMISSION_LOCK_COOLDOWN = 0
