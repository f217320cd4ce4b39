"""Exception taxonomy shared by the service and API layers."""

from __future__ import annotations

from typing import Any, Optional


class CarpoolError(Exception):
    """Base class; ``status_code`` is the HTTP status the API renders."""

    status_code = 500

    def __init__(self, message: str, errors: Optional[list[dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors


class ValidationError(CarpoolError):
    """Malformed or missing input."""

    status_code = 400


class AuthenticationError(CarpoolError):
    status_code = 401


class ForbiddenError(CarpoolError):
    """Caller does not own the resource."""

    status_code = 403


class NotFoundError(CarpoolError):
    status_code = 404


class ConflictError(CarpoolError):
    """A state-transition precondition does not hold."""

    status_code = 409


class RequestAlreadyResolvedError(ConflictError):
    """The booking request has already left ``pending``."""


class InsufficientSeatsError(ConflictError):
    """The ride cannot supply the requested seats."""


class InternalError(CarpoolError):
    status_code = 500
