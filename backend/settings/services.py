import logging
from typing import Optional

from django.conf import settings

from .models import KitchenZone, Printer

logger = logging.getLogger(__name__)


def channel_for_zone(zone: Optional[KitchenZone]) -> str:
    """Channel name for a category's zone; categories without a zone go to the default channel."""
    if zone is None or not zone.is_active or not zone.name.strip():
        return getattr(settings, "DEFAULT_KITCHEN_CHANNEL", "GENERAL")
    return zone.channel


class PrintRoutingService:
    """
    Resolves the destination printer of a ticket channel.

    Resolution order for kitchen channels: the zone's own active printer,
    then the ``DEFAULT_KITCHEN_PRINTER`` fallback. The bill channel always
    resolves to ``BILL_PRINTER``. An unresolved channel returns ``None`` and
    the caller reports it as a per-channel failure.
    """

    @staticmethod
    def resolve_printer(channel: str) -> Optional[Printer]:
        bill_channel = getattr(settings, "BILL_CHANNEL", "CAJA")
        if channel == bill_channel:
            return PrintRoutingService._printer_by_name(
                getattr(settings, "BILL_PRINTER", "")
            )

        zone = (
            KitchenZone.objects.select_related("printer")
            .filter(is_active=True, name__iexact=channel)
            .first()
        )
        if zone is not None and zone.printer is not None and zone.printer.is_active:
            return zone.printer

        fallback = PrintRoutingService._printer_by_name(
            getattr(settings, "DEFAULT_KITCHEN_PRINTER", "")
        )
        if fallback is None:
            logger.warning(f"No printer routed for channel {channel}")
        return fallback

    @staticmethod
    def _printer_by_name(name: str) -> Optional[Printer]:
        if not name:
            return None
        return Printer.objects.filter(name=name, is_active=True).first()
