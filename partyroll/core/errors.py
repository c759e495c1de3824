"""
Errors raised by the action layer.

Routes never build error responses by hand: services raise one of these and
the handlers registered in ``partyroll.main`` turn them into
``{"error": ...}`` bodies with the matching status code.
"""
from typing import Any, Optional


class ActionError(Exception):
    """A business rule rejected the request (HTTP 400)."""
    status_code = 400

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationFailed(ActionError):
    """Input did not match the expected schema (HTTP 400)."""

    def __init__(self, message: str = "Validation failed", details: Optional[Any] = None):
        super().__init__(message, details)


class NotFoundError(ActionError):
    """The addressed row does not exist (HTTP 404)."""
    status_code = 404
