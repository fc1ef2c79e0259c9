"""Domain-specific exceptions for token services."""

from apps.core.exceptions import (
    RationServiceError,
    ValidationError,
    NotFoundError,
    AuthError,
    StorageError,
)


class TokensServiceError(RationServiceError):
    """Base exception for token services."""
    pass


class ShopRequiredError(TokensServiceError, ValidationError):
    """Raised when a token is requested without a shop."""
    pass


class InvalidTokenStatusError(TokensServiceError, ValidationError):
    """Raised when a status is not one of ``TokenStatus``."""
    pass


class InvalidBroadcastError(TokensServiceError, ValidationError):
    """Raised when a broadcast has an unknown card type or a bad interval."""
    pass


class TokenNotFoundError(TokensServiceError, NotFoundError):
    """Raised when a token does not exist."""
    pass


class TokenAccessError(TokensServiceError, AuthError):
    """Raised when a user acts on a token of another shop."""
    pass


class TokenStorageError(TokensServiceError, StorageError):
    """Raised when a token cannot be stored."""
    pass
