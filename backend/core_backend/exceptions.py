"""
DRF exception handler that turns order engine errors into JSON responses.
"""
import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler

from orders.exceptions import OrderServiceError

logger = logging.getLogger(__name__)


def domain_exception_handler(exc, context):
    """
    Map ``OrderServiceError`` subclasses to their status code and fall back
    to DRF's default handling for everything else.
    """
    if isinstance(exc, OrderServiceError):
        request = context.get("request")
        path = request.path if request is not None else "-"
        if exc.status_code >= 409:
            logger.warning(f"{exc.__class__.__name__} on {path}: {exc.message}")
        else:
            logger.info(f"{exc.__class__.__name__} on {path}: {exc.message}")

        body = {"error": exc.message, "code": exc.default_code}
        if exc.details:
            body["details"] = exc.details
        return Response(body, status=exc.status_code)

    return exception_handler(exc, context)
