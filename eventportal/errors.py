"""
Error taxonomy for the event portal.

Store boundaries raise these instead of leaking driver exceptions, so
callers branch on the exception type rather than on message text.
"""
from typing import Optional


class PortalError(Exception):
    """Base class for all portal errors."""


class NotAuthenticated(PortalError):
    """No user session."""


class NotFound(PortalError):
    """A profile or event row does not exist."""


class PermissionDenied(PortalError):
    """The current user may not perform the action."""


class ConstraintViolation(PortalError):
    """A store constraint rejected a write."""

    def __init__(self, message: str, constraint: Optional[str] = None):
        super().__init__(message)
        self.constraint = constraint


class UsernameTaken(ConstraintViolation):
    """The requested username already belongs to another profile."""

    MESSAGE = 'This username is already taken. Please choose another one.'

    def __init__(self, constraint: Optional[str] = 'profiles.username'):
        super().__init__(self.MESSAGE, constraint)


class TimeSourceUnavailable(PortalError):
    """The trusted clock could not be read."""


class StoreError(PortalError):
    """Any other failure reported by the data store."""


class NotificationError(PortalError):
    """The notification transport failed to deliver."""
