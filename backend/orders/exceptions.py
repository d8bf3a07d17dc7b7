"""
Domain exceptions for the order engine.

Each class carries the HTTP status the API reports for it, so views can let
these propagate to ``core_backend.exceptions.domain_exception_handler``.
"""


class OrderServiceError(Exception):
    """Base exception for order engine errors."""

    status_code = 400
    default_code = "order_error"

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details


class OrderValidationError(OrderServiceError, ValueError):
    """Raised when input is malformed or a business precondition fails."""

    default_code = "validation_error"


class OrderNotFoundError(OrderServiceError, LookupError):
    """Raised when an order, line item, table, product or add-on does not exist."""

    status_code = 404
    default_code = "not_found"

    def __init__(self, kind, identifier, message=None):
        self.kind = kind
        self.identifier = identifier
        if message is None:
            message = f"{kind} {identifier} not found"
        super().__init__(message, details={"kind": kind, "id": identifier})


class TableConflictError(OrderServiceError):
    """Raised when another server claimed the table first."""

    status_code = 409
    default_code = "table_conflict"

    def __init__(self, table_number, message=None):
        self.table_number = table_number
        if message is None:
            message = f"Table {table_number} was already taken by another server."
        super().__init__(message, details={"table": table_number})


class InvalidOrderStateError(OrderServiceError):
    """Raised when an operation is not allowed in the order's current status."""

    status_code = 409
    default_code = "invalid_state"

    def __init__(self, order_number, current_status, operation, message=None):
        self.current_status = current_status
        self.operation = operation
        if message is None:
            message = f"Cannot {operation} order #{order_number} while it is {current_status}."
        super().__init__(
            message,
            details={"order": order_number, "status": current_status, "operation": operation},
        )
