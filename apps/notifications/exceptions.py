"""
Domain exceptions for notifications app.
"""
from apps.core.exceptions import RationServiceError, ValidationError, NotFoundError, AuthError


class NotificationServiceError(RationServiceError):
    """Base exception for notification service errors."""
    pass


class NotificationValidationError(NotificationServiceError, ValidationError):
    """Raised when a notification is missing its type or message."""
    pass


class NotificationNotFoundError(NotificationServiceError, NotFoundError):
    """Raised when a notification does not exist."""
    pass


class NotificationTargetNotFoundError(NotificationServiceError, NotFoundError):
    """Raised when the addressed user or shop does not exist."""
    pass


class NotificationAccessError(NotificationServiceError, AuthError):
    """Raised when a user acknowledges another shop's notification."""
    pass
