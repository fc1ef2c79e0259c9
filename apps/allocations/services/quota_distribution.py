"""
Quota distribution service.

Records how much of an allocation a cardholder has physically collected.
Every change is written to the append-only QuotaChangeLog in the same
transaction as the allocation update.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.allocations.models import MonthlyAllocation, QuotaChangeLog

from .exceptions import (
    InvalidQuantityError,
    QuotaExceededError,
    AllocationNotFoundError,
)

logger = logging.getLogger(__name__)

DEFAULT_MODIFICATION_REASON = 'Distribution by shopkeeper'
DEFAULT_LOG_REASON = 'Ration distribution'


def parse_quantity(value) -> Decimal:
    """
    Convert a client-supplied quantity to a non-negative Decimal.

    Raises:
        InvalidQuantityError: If the value is not a finite number >= 0
    """
    if value is None or isinstance(value, bool):
        raise InvalidQuantityError("Quantity must be a non-negative number")
    try:
        quantity = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidQuantityError("Quantity must be a non-negative number")
    if not quantity.is_finite() or quantity < 0:
        raise InvalidQuantityError("Quantity must be a non-negative number")
    return quantity


def _format_quantity(quantity: Decimal) -> str:
    if quantity == quantity.to_integral_value():
        return str(quantity.quantize(Decimal('1')))
    return str(quantity.normalize())


@transaction.atomic
def distribute(
    *,
    user_id: int,
    item_code: str,
    new_collected_quantity,
    actor: User,
    month: int,
    year: int,
    reason: Optional[str] = None
) -> MonthlyAllocation:
    """
    Set the collected quantity of one allocation.

    The allocation row is locked for the duration of the transaction.
    Nothing is written when validation fails. A failing log insert rolls
    back the allocation update.

    Args:
        user_id: Cardholder ID
        item_code: Item to update
        new_collected_quantity: New absolute collected amount; may be lower
            than the current one (corrections are logged as negative changes)
        actor: Shopkeeper or admin performing the distribution
        month: Calendar month of the allocation
        year: Calendar year of the allocation
        reason: Free-text reason stored on the allocation and the log

    Returns:
        Updated MonthlyAllocation

    Raises:
        InvalidQuantityError: If the quantity is negative or not a number
        AllocationNotFoundError: If no allocation exists for the period
        QuotaExceededError: If the quantity is above the eligible amount
    """
    new_quantity = parse_quantity(new_collected_quantity)

    try:
        allocation = (
            MonthlyAllocation.objects
            .select_for_update()
            .get(user_id=user_id, item_code=item_code, month=month, year=year)
        )
    except MonthlyAllocation.DoesNotExist:
        raise AllocationNotFoundError("Allocation not found")

    if new_quantity > allocation.eligible_quantity:
        raise QuotaExceededError(_format_quantity(allocation.eligible_quantity))

    old_quantity = allocation.collected_quantity

    allocation.collected_quantity = new_quantity
    allocation.collection_date = timezone.now()
    allocation.last_modified_by = actor
    allocation.modification_reason = reason or DEFAULT_MODIFICATION_REASON
    allocation.save(update_fields=[
        'collected_quantity',
        'collection_date',
        'last_modified_by',
        'modification_reason',
        'updated_at',
    ])

    QuotaChangeLog.objects.create(
        allocation=allocation,
        user_id=allocation.user_id,
        item_code=allocation.item_code,
        month=month,
        year=year,
        old_quantity=old_quantity,
        new_quantity=new_quantity,
        change_amount=new_quantity - old_quantity,
        changed_by=actor,
        changed_by_role=actor.role,
        reason=reason or DEFAULT_LOG_REASON,
    )

    logger.info(
        "Distributed %s to user %s (%s -> %s) by %s",
        allocation.item_code, user_id, old_quantity, new_quantity, actor.id
    )
    return allocation


def get_quota_history(*, user_id: int, limit: int = 20) -> QuerySet:
    """Return the newest change-log rows for a user, with the actor joined."""
    return (
        QuotaChangeLog.objects
        .filter(user_id=user_id)
        .select_related('changed_by')
        .order_by('-created_at', '-id')[:limit]
    )
