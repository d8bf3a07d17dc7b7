from django.dispatch import Signal

# Sent after the payment transaction commits, with ``payment=``.
payment_completed = Signal()
