# quotebroker/core/errors.py
from __future__ import annotations


class WorkflowError(Exception):
    """
    Base for every error that is rendered to the client as {"error": message}.
    """

    status_code: int = 500
    default_message: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(WorkflowError):
    status_code = 401
    default_message = "Authentication failed."


class InvalidInput(WorkflowError):
    status_code = 400
    default_message = "Invalid request body."


class InvalidOperation(WorkflowError):
    status_code = 400
    default_message = "Operation not allowed."


class NotFound(WorkflowError):
    status_code = 404
    default_message = "Not found."


class PermissionDenied(WorkflowError):
    status_code = 403
    default_message = "Permission denied."


class DependencyFailure(WorkflowError):
    status_code = 500


class ServiceConfigError(DependencyFailure):
    default_message = "Server configuration error."


class NotificationError(Exception):
    """Raised by the email transport; never reaches the client."""
