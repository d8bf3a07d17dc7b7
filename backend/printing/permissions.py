import hmac

from django.conf import settings
from rest_framework.permissions import BasePermission


class HasPrintAgentToken(BasePermission):
    """
    Permission for the print agent.
    The agent sends the shared secret in the X-Printer-Token header. When
    PRINT_AGENT_TOKEN is empty the check is disabled (development setups).
    """

    message = "Invalid or missing printer token."

    def has_permission(self, request, view):
        expected = getattr(settings, "PRINT_AGENT_TOKEN", "")
        if not expected:
            return True
        provided = request.headers.get("X-Printer-Token", "")
        return hmac.compare_digest(str(provided), str(expected))
