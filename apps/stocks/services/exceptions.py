"""Domain-specific exceptions for stocks services."""

from apps.core.exceptions import RationServiceError, ValidationError, NotFoundError


class StocksServiceError(RationServiceError):
    """Base exception for stock services."""
    pass


class StockItemNotFoundError(StocksServiceError, NotFoundError):
    """Raised when a shop does not stock the requested item."""
    pass


class InvalidStockQuantityError(StocksServiceError, ValidationError):
    """Raised when a stock quantity or delta is not a valid number."""
    pass
