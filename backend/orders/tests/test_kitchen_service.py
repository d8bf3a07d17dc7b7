"""
Ticket builder tests.
"""
import pytest
from decimal import Decimal

from orders.services import KitchenService, OrderItemService
from orders.services.kitchen_service import BILL, KITCHEN


@pytest.fixture
def mixed_order(open_order, burger, steak, lemonade, cheese, printers):
    """Items on COCINA, PARRILLA and the default GENERAL channel"""
    OrderItemService.add_product(open_order.pk, burger.pk, add_on_ids=[cheese.pk])
    OrderItemService.add_product(open_order.pk, burger.pk, add_on_ids=[cheese.pk])
    OrderItemService.add_product(open_order.pk, steak.pk, note='Punto medio')
    OrderItemService.add_product(open_order.pk, lemonade.pk)
    return open_order


@pytest.mark.django_db
class TestKitchenTickets:
    def test_one_ticket_per_channel_sorted_by_name(self, mixed_order):
        payloads = KitchenService.build(mixed_order.pk, KITCHEN)

        assert [p.channel for p in payloads] == ['COCINA', 'GENERAL', 'PARRILLA']
        assert all(p.kind == KITCHEN for p in payloads)

    def test_lines_are_grouped_and_carry_no_prices(self, mixed_order):
        cocina = KitchenService.build(mixed_order.pk, KITCHEN)[0]

        assert len(cocina.lines) == 1
        line = cocina.lines[0]
        assert line.quantity == 2
        assert line.product_name == 'Burger'
        assert line.add_ons == ['Queso']
        assert line.amount is None
        assert cocina.totals is None
        assert 'amount' not in cocina.to_dict()['lines'][0]

    def test_printers_resolved_per_channel(self, mixed_order, printers):
        payloads = {p.channel: p for p in KitchenService.build(mixed_order.pk, KITCHEN)}

        assert payloads['COCINA'].printer == printers['COCINA']
        assert payloads['PARRILLA'].printer == printers['PARRILLA']
        assert payloads['GENERAL'].printer is None

    def test_default_kitchen_printer_fallback(self, mixed_order, settings, kitchen_printer):
        settings.DEFAULT_KITCHEN_PRINTER = kitchen_printer.name
        payloads = {p.channel: p for p in KitchenService.build(mixed_order.pk, KITCHEN)}
        assert payloads['GENERAL'].printer == kitchen_printer

    def test_single_channel_selector(self, mixed_order):
        payloads = KitchenService.build(mixed_order.pk, 'parrilla')

        assert len(payloads) == 1
        assert payloads[0].channel == 'PARRILLA'
        assert payloads[0].lines[0].note == 'Punto medio'

    def test_empty_order_builds_nothing(self, open_order):
        assert KitchenService.build(open_order.pk, KITCHEN) == []

    def test_fingerprint_ignores_print_time(self, mixed_order):
        first = KitchenService.build(mixed_order.pk, KITCHEN)
        second = KitchenService.build(mixed_order.pk, KITCHEN)
        assert [p.fingerprint for p in first] == [p.fingerprint for p in second]

    def test_fingerprint_changes_with_content(self, mixed_order):
        before = KitchenService.build(mixed_order.pk, 'COCINA')[0].fingerprint
        item = mixed_order.items.filter(product__name='Burger').first()
        OrderItemService.increment(item.pk)
        after = KitchenService.build(mixed_order.pk, 'COCINA')[0].fingerprint
        assert before != after

    def test_kitchen_text(self, mixed_order, waiter):
        text = KitchenService.build(mixed_order.pk, 'COCINA')[0].to_dict()['text']

        assert 'COMANDA - COCINA' in text
        assert f'Pedido #{mixed_order.number}' in text
        assert 'Mesero: Camila Rojas' in text
        assert '2x BURGER' in text
        assert '  + Queso' in text
        assert '$' not in text


@pytest.mark.django_db
class TestBill:
    def test_bill_has_amounts_and_totals(self, worked_example_order, bill_printer):
        payload = KitchenService.build(worked_example_order.pk, BILL)[0]

        assert payload.kind == BILL
        assert payload.channel == 'CAJA'
        assert payload.printer == bill_printer
        assert [(l.quantity, l.amount) for l in payload.lines] == [
            (2, Decimal('11000')),
            (2, Decimal('10000')),
        ]
        assert payload.totals.subtotal == Decimal('21000')
        assert payload.totals.service_charge == Decimal('2100')
        assert payload.totals.total == Decimal('23100')

    def test_bill_text(self, worked_example_order, bill_printer):
        text = KitchenService.build(worked_example_order.pk, BILL)[0].to_dict()['text']

        assert 'PRECUENTA' in text
        assert '$21.000' in text
        assert 'Servicio 10%' in text
        assert '$2.100' in text
        assert '$23.100' in text
        assert '>> no onions' in text

    def test_bill_without_printer(self, worked_example_order):
        payload = KitchenService.build(worked_example_order.pk, BILL)[0]
        assert payload.printer is None
        assert payload.to_dict()['printer'] is None
