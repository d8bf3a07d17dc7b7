"""
Short-lived per-order locks that absorb duplicate print requests.

A double tap on "send to kitchen" or "print bill", a client retry, or a
payment-triggered emission racing a manual one must produce a single
physical ticket. The lock lives in the default Django cache so that every
worker sharing the cache sees the same holder.
"""
import logging
import uuid

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)


class EmissionLock:
    """
    Per-(scope, order) exclusive lock with automatic expiry.

    ``try_acquire`` relies on ``cache.add``, which only writes when the key is
    absent, so the check and the set happen as one step. The stored value is
    a random token kept by the acquiring instance; ``release`` only touches
    the entry while it still carries that token, so a holder whose entry
    expired cannot free a lock that someone else has since taken.

    An entry left behind by a crashed holder disappears after ``timeout``
    seconds. ``release`` does not delete the key: it shortens its life to
    ``cooldown`` seconds so that a duplicate arriving right after the
    operation finished is still absorbed.
    """

    KITCHEN = "kitchen"
    BILL = "bill"

    def __init__(self, scope, timeout=None, cooldown=None):
        self.scope = scope
        self.timeout = (
            timeout if timeout is not None else getattr(settings, "EMISSION_LOCK_TIMEOUT", 6)
        )
        self.cooldown = (
            cooldown if cooldown is not None else getattr(settings, "EMISSION_LOCK_COOLDOWN", 0.8)
        )
        self._tokens = {}

    def key(self, order_id):
        return f"emission:{self.scope}:{order_id}"

    def try_acquire(self, order_id) -> bool:
        token = uuid.uuid4().hex
        acquired = cache.add(self.key(order_id), token, self.timeout)
        if acquired:
            self._tokens[order_id] = token
        else:
            logger.info(f"Emission lock busy for {self.scope} on order {order_id}")
        return acquired

    def release(self, order_id):
        token = self._tokens.pop(order_id, None)
        key = self.key(order_id)
        if token is None or cache.get(key) != token:
            logger.warning(
                f"Emission lock for {self.scope} on order {order_id} expired before release"
            )
            return

        if self.cooldown and self.cooldown > 0:
            cache.set(key, token, self.cooldown)
        else:
            cache.delete(key)

    def is_held(self, order_id) -> bool:
        return cache.get(self.key(order_id)) is not None
