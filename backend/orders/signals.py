from django.dispatch import receiver
import logging

from payments.signals import payment_completed

logger = logging.getLogger(__name__)


@receiver(payment_completed)
def handle_payment_completion(sender, **kwargs):
    """
    Queue kitchen tickets once a payment is committed.
    A failure to queue is logged and never propagates to the payment.
    """
    payment = kwargs.get("payment")
    if payment is None:
        return

    from .tasks import emit_kitchen_tickets_task
    from .services.emission_service import TRIGGER_PAYMENT

    try:
        emit_kitchen_tickets_task.delay(payment.order_id, TRIGGER_PAYMENT)
        logger.info(f"Queued kitchen emission for paid order {payment.order_id}")
    except Exception as e:
        logger.error(f"Failed to queue kitchen emission for order {payment.order_id}: {e}")
