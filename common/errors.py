"""
Client-facing error taxonomy.

Raised by validators and the order service; the HTTP layer renders them as
{"error": message} with the carried status code. Downstream and broker
failures are not in this module: they are recovered where they happen.
"""

from __future__ import annotations


class OrderServiceError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code = 400
    message = "Bad request"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidPayload(OrderServiceError):
    message = "Invalid order payload"


class InvalidQuery(OrderServiceError):
    message = "Invalid query parameters"


class InvalidCancellation(OrderServiceError):
    message = "Invalid cancellation request"


class OrderNotFound(OrderServiceError):
    """Only raised when placeholder orders are disabled."""

    status_code = 404
    message = "Order not found"
