"""Stocks app services layer."""

from .exceptions import (
    StocksServiceError,
    StockItemNotFoundError,
    InvalidStockQuantityError,
)
from .stock_audit import (
    AuditOutcome,
    record_stock_audit,
    list_stock_audit,
)
from .stock_management import (
    list_stock,
    apply_stock_delta,
    correct_stock,
    allocate_government_stock,
)

__all__ = [
    # Exceptions
    'StocksServiceError',
    'StockItemNotFoundError',
    'InvalidStockQuantityError',
    # Audit
    'AuditOutcome',
    'record_stock_audit',
    'list_stock_audit',
    # Inventory
    'list_stock',
    'apply_stock_delta',
    'correct_stock',
    'allocate_government_stock',
]
