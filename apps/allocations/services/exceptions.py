"""
Domain-specific exceptions for allocations app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""

from apps.core.exceptions import (
    RationServiceError,
    ValidationError,
    NotFoundError,
    StorageError,
)


class AllocationsServiceError(RationServiceError):
    """Base exception for all allocations service errors."""
    pass


class InvalidQuantityError(AllocationsServiceError, ValidationError):
    """Raised when a quantity is negative or not a number."""
    pass


class QuotaExceededError(AllocationsServiceError, ValidationError):
    """Raised when a collected quantity would exceed the eligible amount."""

    def __init__(self, eligible_quantity, unit='kg'):
        self.eligible_quantity = eligible_quantity
        super().__init__(
            f"Cannot collect more than eligible amount ({eligible_quantity} {unit})"
        )


class AllocationNotFoundError(AllocationsServiceError, NotFoundError):
    """Raised when no allocation exists for the user, item and period."""
    pass


class AllocationUserNotFoundError(AllocationsServiceError, NotFoundError):
    """Raised when the target user of an allocation operation does not exist."""
    pass


class AllocationOverrideError(AllocationsServiceError, ValidationError):
    """Raised when an eligible-quantity override is not allowed."""
    pass


class AllocationStorageError(AllocationsServiceError, StorageError):
    """Raised when allocations cannot be read or created."""
    pass
