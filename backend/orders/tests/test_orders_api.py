"""
Orders API integration tests.

Domain errors are rendered by core_backend.exceptions.domain_exception_handler
as {"error", "code", "details"} with the error's status code.
"""
import pytest

from orders.models import Order, Table
from orders.services import OrderItemService, OrderService
from core_backend.infrastructure.locks import EmissionLock
from printing.models import PrintJob


@pytest.mark.django_db
class TestTablesAPI:
    def test_requires_authentication(self, api_client, table):
        response = api_client.get('/api/tables/')
        assert response.status_code == 403

    def test_list_tables(self, waiter_client, table, table_2):
        response = waiter_client.get('/api/tables/')

        assert response.status_code == 200
        assert [t['number'] for t in response.data] == [1, 2]

    def test_claim_creates_then_reuses(self, waiter_client, table):
        first = waiter_client.post(f'/api/tables/{table.pk}/claim/')
        second = waiter_client.post(f'/api/tables/{table.pk}/claim/')

        assert first.status_code == 201
        assert second.status_code == 200
        assert first.data['id'] == second.data['id']
        assert first.data['status'] == 'OPEN'
        assert first.data['groups'] == []
        assert first.data['totals']['total'] == '0'

    def test_claim_conflict(self, waiter_client, table, other_waiter):
        # Occupied without an active order: another server's claim is mid-flight
        Table.objects.filter(pk=table.pk).update(status=Table.TableStatus.OCCUPIED, server=other_waiter)

        response = waiter_client.post(f'/api/tables/{table.pk}/claim/')

        assert response.status_code == 409
        assert response.data['code'] == 'table_conflict'

    def test_claim_unknown_table(self, waiter_client):
        response = waiter_client.post('/api/tables/999/claim/')
        assert response.status_code == 404
        assert response.data['code'] == 'not_found'

    def test_active_order(self, waiter_client, open_order, table, table_2):
        assert waiter_client.get(f'/api/tables/{table.pk}/active-order/').data == {'order_id': open_order.pk}
        assert waiter_client.get(f'/api/tables/{table_2.pk}/active-order/').data == {'order_id': None}


@pytest.mark.django_db
class TestOrderDetailAPI:
    def test_detail_has_groups_and_totals(self, waiter_client, worked_example_order):
        response = waiter_client.get(f'/api/orders/{worked_example_order.pk}/')

        assert response.status_code == 200
        assert response.data['table_number'] == 1
        assert response.data['server_name'] == 'Camila Rojas'
        groups = response.data['groups']
        assert [(g['product_name'], g['quantity'], g['note']) for g in groups] == [
            ('Burger', 2, ''),
            ('Burger', 2, 'no onions'),
        ]
        assert groups[0]['add_ons'][0]['name'] == 'Queso'
        assert response.data['totals'] == {
            'subtotal': '21000',
            'service_percentage': '10',
            'service_charge': '2100',
            'total': '23100',
        }

    def test_unknown_order(self, waiter_client):
        response = waiter_client.get('/api/orders/999/')
        assert response.status_code == 404

    def test_list_filters_active(self, waiter_client, open_order, table_2, other_waiter):
        voided = OrderService.claim_table(table_2.pk, other_waiter).order
        OrderService.void_order(voided.pk)

        response = waiter_client.get('/api/orders/?active=true')

        assert response.status_code == 200
        assert [o['id'] for o in response.data] == [open_order.pk]

    def test_set_service_percentage(self, waiter_client, worked_example_order):
        response = waiter_client.post(
            f'/api/orders/{worked_example_order.pk}/service-percentage/',
            {'service_percentage': '0'},
            format='json',
        )

        assert response.status_code == 200
        assert response.data['totals']['service_charge'] == '0'
        assert response.data['totals']['total'] == '21000'

    def test_invalid_service_percentage_changes_nothing(self, waiter_client, worked_example_order):
        response = waiter_client.post(
            f'/api/orders/{worked_example_order.pk}/service-percentage/',
            {'service_percentage': 101},
            format='json',
        )

        worked_example_order.refresh_from_db()
        assert response.status_code == 400
        assert response.data['code'] == 'validation_error'
        assert worked_example_order.total == 23100

    def test_void_and_close(self, waiter_client, open_order, table):
        response = waiter_client.post(f'/api/orders/{open_order.pk}/close/')
        assert response.status_code == 200
        assert response.data['status'] == 'VOIDED'

        response = waiter_client.post(f'/api/orders/{open_order.pk}/void/')
        assert response.status_code == 409
        assert response.data['code'] == 'invalid_state'


@pytest.mark.django_db
class TestEmissionAPI:
    def test_emit_tickets_ok(self, waiter_client, open_order, burger, printers):
        OrderItemService.add_product(open_order.pk, burger.pk)

        response = waiter_client.post(f'/api/orders/{open_order.pk}/emit-tickets/')

        assert response.status_code == 200
        assert response.data['ok'] is True
        assert response.data['channels'][0]['channel'] == 'COCINA'

    def test_emit_tickets_partial(self, waiter_client, open_order, burger, lemonade, printers):
        OrderItemService.add_product(open_order.pk, burger.pk)
        OrderItemService.add_product(open_order.pk, lemonade.pk)

        response = waiter_client.post(f'/api/orders/{open_order.pk}/emit-tickets/')

        assert response.status_code == 207
        failed = [c for c in response.data['channels'] if not c['ok']]
        assert failed[0]['reason'] == 'No printer assigned for channel GENERAL'

    def test_emit_tickets_all_failed(self, waiter_client, open_order, lemonade):
        OrderItemService.add_product(open_order.pk, lemonade.pk)
        response = waiter_client.post(f'/api/orders/{open_order.pk}/emit-tickets/')
        assert response.status_code == 502

    def test_emit_tickets_deduplicated(self, waiter_client, open_order, burger, printers):
        OrderItemService.add_product(open_order.pk, burger.pk)
        EmissionLock(EmissionLock.KITCHEN).try_acquire(open_order.pk)

        response = waiter_client.post(f'/api/orders/{open_order.pk}/emit-tickets/')

        assert response.status_code == 202
        assert response.data['deduplicated'] is True
        assert not PrintJob.objects.exists()

    def test_emit_empty_order(self, waiter_client, open_order):
        response = waiter_client.post(f'/api/orders/{open_order.pk}/emit-tickets/')
        assert response.status_code == 400

    def test_print_bill_with_warning(self, waiter_client, worked_example_order, bill_printer):
        response = waiter_client.post(
            f'/api/orders/{worked_example_order.pk}/print-bill/',
            {'service_percentage': 'diez'},
            format='json',
        )

        assert response.status_code == 200
        assert response.data['totals']['total'] == '23100'
        assert len(response.data['warnings']) == 1


@pytest.mark.django_db
class TestItemsAPI:
    def test_add_item(self, waiter_client, open_order, burger, cheese):
        response = waiter_client.post(
            f'/api/orders/{open_order.pk}/items/',
            {'product_id': burger.pk, 'add_on_ids': [cheese.pk], 'note': 'sin tomate'},
            format='json',
        )

        assert response.status_code == 201
        assert response.data['totals']['subtotal'] == '5500'
        assert open_order.items.get().note == 'sin tomate'

    def test_add_item_missing_product_id(self, waiter_client, open_order):
        response = waiter_client.post(f'/api/orders/{open_order.pk}/items/', {}, format='json')
        assert response.status_code == 400
        assert 'product_id' in response.data

    def test_add_item_disallowed_add_on(self, waiter_client, open_order, steak, cheese):
        response = waiter_client.post(
            f'/api/orders/{open_order.pk}/items/',
            {'product_id': steak.pk, 'add_on_ids': [cheese.pk]},
            format='json',
        )
        assert response.status_code == 400
        assert not open_order.items.exists()

    def test_increment_and_decrement_to_zero(self, waiter_client, open_order, burger):
        OrderItemService.add_product(open_order.pk, burger.pk)
        item = open_order.items.get()
        url = f'/api/orders/{open_order.pk}/items/{item.pk}/'

        response = waiter_client.patch(url, {'op': 'inc'}, format='json')
        assert response.data['totals']['subtotal'] == '10000'

        waiter_client.patch(url, {'op': 'dec'}, format='json')
        response = waiter_client.patch(url, {'op': 'dec'}, format='json')
        assert response.status_code == 200
        assert response.data['totals']['subtotal'] == '0'
        assert not open_order.items.exists()

        response = waiter_client.patch(url, {'op': 'dec'}, format='json')
        assert response.status_code == 404

    def test_invalid_op(self, waiter_client, open_order, burger):
        OrderItemService.add_product(open_order.pk, burger.pk)
        item = open_order.items.get()
        response = waiter_client.patch(
            f'/api/orders/{open_order.pk}/items/{item.pk}/', {'op': 'double'}, format='json'
        )
        assert response.status_code == 400

    def test_delete_item(self, waiter_client, open_order, burger):
        OrderItemService.add_product(open_order.pk, burger.pk)
        item = open_order.items.get()

        response = waiter_client.delete(f'/api/orders/{open_order.pk}/items/{item.pk}/')

        assert response.status_code == 200
        assert response.data['totals']['total'] == '0'

    def test_attach_add_on(self, waiter_client, open_order, burger, fries):
        OrderItemService.add_product(open_order.pk, burger.pk)
        item = open_order.items.get()

        response = waiter_client.post(
            f'/api/orders/{open_order.pk}/items/{item.pk}/add-ons/',
            {'add_on_id': fries.pk},
            format='json',
        )

        assert response.status_code == 200
        assert response.data['totals']['subtotal'] == '6500'

    def test_item_note(self, waiter_client, open_order, burger):
        OrderItemService.add_product(open_order.pk, burger.pk)
        item = open_order.items.get()

        response = waiter_client.patch(
            f'/api/orders/{open_order.pk}/items/{item.pk}/note/',
            {'note': '  bien cocido '},
            format='json',
        )

        assert response.status_code == 200
        assert response.data['note'] == 'bien cocido'

    def test_group_endpoints(self, waiter_client, worked_example_order):
        detail = waiter_client.get(f'/api/orders/{worked_example_order.pk}/').data
        cheese_group, no_onions_group = detail['groups']

        response = waiter_client.post(
            f'/api/orders/{worked_example_order.pk}/items/group-note/',
            {'item_ids': cheese_group['item_ids'], 'note': 'para llevar'},
            format='json',
        )
        assert response.status_code == 200
        assert response.data['note'] == 'para llevar'

        response = waiter_client.post(
            f'/api/orders/{worked_example_order.pk}/items/remove-group/',
            {'item_ids': no_onions_group['item_ids']},
            format='json',
        )
        assert response.status_code == 200
        assert response.data['totals']['subtotal'] == '11000'

    def test_items_of_voided_order_are_locked(self, waiter_client, open_order, burger):
        OrderService.void_order(open_order.pk)

        response = waiter_client.post(
            f'/api/orders/{open_order.pk}/items/', {'product_id': burger.pk}, format='json'
        )

        assert response.status_code == 409
        assert Order.objects.get(pk=open_order.pk).status == Order.OrderStatus.VOIDED
