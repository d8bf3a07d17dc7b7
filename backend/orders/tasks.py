from celery import shared_task
import logging

from orders.exceptions import OrderServiceError

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3, default_retry_delay=10)
def emit_kitchen_tickets_task(self, order_id, trigger="payment"):
    """
    Async kitchen ticket emission, queued after a payment commits so that
    printing never blocks or rolls back the payment.

    Returns:
        dict: Emission summary (per-channel results)
    """
    from orders.services.emission_service import TicketEmissionService

    try:
        result = TicketEmissionService.emit_kitchen_tickets(order_id, trigger=trigger)
    except OrderServiceError as e:
        logger.warning(f"Kitchen emission for order {order_id} rejected: {e}")
        return {"ok": False, "error": str(e)}
    except Exception as e:
        logger.error(f"Kitchen emission for order {order_id} failed, retrying: {e}")
        raise self.retry(exc=e)

    if result.deduplicated:
        logger.info(f"Kitchen emission for order {order_id} already in progress, skipped")
    return result.to_dict()
