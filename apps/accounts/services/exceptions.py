"""Domain-specific exceptions for accounts services."""

from apps.core.exceptions import (
    RationServiceError,
    ValidationError,
    NotFoundError,
    AuthError,
)


class AccountsServiceError(RationServiceError):
    """Base exception for accounts services."""
    pass


class CodeDeliveryError(AccountsServiceError):
    """Raised when a verification code cannot be emailed."""
    pass


class InvalidCodeError(AccountsServiceError, AuthError):
    """Raised when a verification code is wrong, expired or already used."""
    pass


class InactiveAccountError(AccountsServiceError, AuthError):
    """Raised when account is deactivated."""
    pass


class RoleMismatchError(AccountsServiceError, AuthError):
    """Raised when a login requests a role the account does not have."""
    pass


class UserNotFoundError(AccountsServiceError, NotFoundError):
    """Raised when user does not exist."""
    pass


class UserUpdateError(AccountsServiceError, ValidationError):
    """Raised when an administrative user change is not allowed."""
    pass
