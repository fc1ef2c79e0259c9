"""
Domain exceptions for complaints app.
"""
from apps.core.exceptions import RationServiceError, ValidationError, NotFoundError


class ComplaintServiceError(RationServiceError):
    """Base exception for complaint service errors."""
    pass


class ComplaintValidationError(ComplaintServiceError, ValidationError):
    """Raised when a complaint lacks its shop or description, or a status is unknown."""
    pass


class ComplaintNotFoundError(ComplaintServiceError, NotFoundError):
    """Raised when a complaint or the shop it names does not exist."""
    pass
