"""
Allocations app services layer.

Entitlement derivation, lazy creation of monthly allocation rows and the
quota distribution workflow. State-changing operations run in
transactions with the allocation row locked.
"""

from .exceptions import (
    AllocationsServiceError,
    InvalidQuantityError,
    QuotaExceededError,
    AllocationNotFoundError,
    AllocationUserNotFoundError,
    AllocationOverrideError,
    AllocationStorageError,
)

from .entitlement_policy import (
    ItemEntitlement,
    derive_allocations,
)

from .allocation_store import (
    get_allocations,
    ensure_allocations,
    get_allocation_history,
)

from .quota_distribution import (
    distribute,
    get_quota_history,
    parse_quantity,
)

from .allocation_overrides import (
    set_eligible_allocations,
)


__all__ = [
    # Exceptions
    'AllocationsServiceError',
    'InvalidQuantityError',
    'QuotaExceededError',
    'AllocationNotFoundError',
    'AllocationUserNotFoundError',
    'AllocationOverrideError',
    'AllocationStorageError',

    # Entitlement policy
    'ItemEntitlement',
    'derive_allocations',

    # Allocation store
    'get_allocations',
    'ensure_allocations',
    'get_allocation_history',

    # Quota distribution
    'distribute',
    'get_quota_history',
    'parse_quantity',

    # Admin overrides
    'set_eligible_allocations',
]
