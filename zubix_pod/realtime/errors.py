"""Error kinds reported to the originating connection as ``error`` events."""

from __future__ import annotations


class GatewayError(Exception):
    """Base class; ``message`` is safe to show to the client."""

    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(GatewayError):
    default_message = "Not found"


class UnauthorizedError(GatewayError):
    default_message = "Not allowed"


class ValidationError(GatewayError):
    default_message = "Invalid payload"


class InternalError(GatewayError):
    default_message = "Internal error"
