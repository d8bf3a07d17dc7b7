"""
Print queue tests: the sink that enqueues tickets and the agent endpoints
that drain them.
"""
import pytest

from orders.services import KitchenService, OrderItemService
from orders.services.kitchen_service import BILL
from printing.models import PrintJob
from printing.services import PrintAgentService, PrintJobSink, PrintSinkError


@pytest.fixture
def cocina_payload(open_order, burger, printers):
    OrderItemService.add_product(open_order.pk, burger.pk)
    return KitchenService.build(open_order.pk, 'COCINA')[0]


@pytest.fixture
def queued_job(cocina_payload):
    return PrintJobSink.submit(cocina_payload)


@pytest.mark.django_db
class TestPrintJobSink:
    def test_submit_queues_pending_job(self, queued_job, cocina_payload, kitchen_printer, open_order):
        assert queued_job.status == PrintJob.Status.PENDING
        assert queued_job.printer == kitchen_printer
        assert queued_job.order == open_order
        assert queued_job.kind == PrintJob.Kind.KITCHEN
        assert queued_job.channel == 'COCINA'
        assert queued_job.fingerprint == cocina_payload.fingerprint
        assert queued_job.body['lines'][0]['product_name'] == 'Burger'

    def test_submit_without_printer(self, worked_example_order):
        payload = KitchenService.build(worked_example_order.pk, BILL)[0]

        with pytest.raises(PrintSinkError, match='No printer assigned for channel CAJA'):
            PrintJobSink.submit(payload)

    def test_submit_to_inactive_printer(self, cocina_payload, kitchen_printer):
        kitchen_printer.is_active = False
        kitchen_printer.save()

        with pytest.raises(PrintSinkError, match='inactive'):
            PrintJobSink.submit(cocina_payload)
        assert not PrintJob.objects.exists()

    def test_already_queued(self, queued_job, open_order):
        assert PrintJobSink.already_queued(open_order.pk, 'COCINA', queued_job.fingerprint) is True
        assert PrintJobSink.already_queued(open_order.pk, 'PARRILLA', queued_job.fingerprint) is False
        assert PrintJobSink.already_queued(open_order.pk, 'COCINA', 'other') is False

    def test_failed_job_does_not_count_as_queued(self, queued_job, open_order):
        PrintAgentService.acknowledge(queued_job.pk, ok=False, error='paper out')
        assert PrintJobSink.already_queued(open_order.pk, 'COCINA', queued_job.fingerprint) is False


@pytest.mark.django_db
class TestPrintAgentService:
    def test_pending_jobs_oldest_first(self, cocina_payload):
        first = PrintJobSink.submit(cocina_payload)
        second = PrintJobSink.submit(cocina_payload)

        assert PrintAgentService.pending_jobs() == [first, second]
        assert PrintAgentService.pending_jobs(limit=1) == [first]

    def test_pending_jobs_for_one_printer(self, queued_job):
        assert PrintAgentService.pending_jobs('Cocina 80mm') == [queued_job]
        assert PrintAgentService.pending_jobs('Parrilla 80mm') == []

    def test_acknowledge_printed(self, queued_job):
        job = PrintAgentService.acknowledge(queued_job.pk, ok=True)

        job.refresh_from_db()
        assert job.status == PrintJob.Status.PRINTED
        assert job.attempts == 1
        assert PrintAgentService.pending_jobs() == []

    def test_failed_job_stays_pending_for_retry(self, queued_job):
        PrintAgentService.acknowledge(queued_job.pk, ok=False)

        queued_job.refresh_from_db()
        assert queued_job.status == PrintJob.Status.ERROR
        assert queued_job.error == 'Unknown printer error'
        assert PrintAgentService.pending_jobs() == [queued_job]

    def test_acknowledge_unknown_job(self, db):
        with pytest.raises(PrintJob.DoesNotExist):
            PrintAgentService.acknowledge(999, ok=True)


@pytest.mark.django_db
class TestPrintAgentAPI:
    def test_pending_without_token_configured(self, api_client, queued_job):
        response = api_client.get('/api/print-jobs/pending/')

        assert response.status_code == 200
        assert [j['id'] for j in response.data['jobs']] == [queued_job.pk]
        assert response.data['jobs'][0]['printer'] == 'Cocina 80mm'

    def test_token_required_when_configured(self, api_client, queued_job, settings):
        settings.PRINT_AGENT_TOKEN = 's3cret'

        assert api_client.get('/api/print-jobs/pending/').status_code == 403
        response = api_client.get('/api/print-jobs/pending/', HTTP_X_PRINTER_TOKEN='wrong')
        assert response.status_code == 403

        response = api_client.get('/api/print-jobs/pending/', HTTP_X_PRINTER_TOKEN='s3cret')
        assert response.status_code == 200

    def test_pending_filter_and_invalid_limit(self, api_client, queued_job):
        response = api_client.get('/api/print-jobs/pending/?printer=Parrilla 80mm')
        assert response.data['jobs'] == []

        response = api_client.get('/api/print-jobs/pending/?limit=many')
        assert response.status_code == 400

    def test_acknowledge(self, api_client, queued_job):
        response = api_client.post(f'/api/print-jobs/{queued_job.pk}/ack/', {'ok': True}, format='json')

        assert response.status_code == 200
        assert response.data == {'ok': True, 'id': queued_job.pk, 'status': 'PRINTED'}

    def test_acknowledge_requires_boolean(self, api_client, queued_job):
        response = api_client.post(f'/api/print-jobs/{queued_job.pk}/ack/', {'ok': 'yes'}, format='json')
        assert response.status_code == 400

    def test_acknowledge_unknown_job(self, api_client, db):
        response = api_client.post('/api/print-jobs/999/ack/', {'ok': True}, format='json')
        assert response.status_code == 404
