# apps/core/exceptions.py
"""
Error taxonomy shared by the service layer.

Services raise these; the action boundary (see ``apps.core.results``) turns
them into ``{"success": False, "error": message}`` envelopes. The message is
always safe to show to the caller.
"""


class ServiceError(Exception):
    """Base class for expected, user-facing failures."""

    default_message = "Operation failed"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotAuthenticated(ServiceError):
    default_message = "Not authenticated"


class AccessDenied(ServiceError):
    default_message = "Access denied"


class NotFound(ServiceError):
    """
    Missing record, or a record the caller does not own. Both read the same
    so ownership is never revealed.
    """
    default_message = "Not found"


class InvalidState(ServiceError):
    default_message = "Operation not allowed in the current state"


class InvalidInput(ServiceError):
    default_message = "Invalid input"
