"""
Allocation store.

Guarantees that a cardholder has one MonthlyAllocation row per entitled
item for a period, creating missing rows from the entitlement policy on
first read.
"""

import logging
from decimal import Decimal
from typing import List

from django.db import DatabaseError, transaction

from apps.accounts.models import User
from apps.allocations.models import MonthlyAllocation

from .entitlement_policy import derive_allocations
from .exceptions import AllocationStorageError

logger = logging.getLogger(__name__)


def get_allocations(*, user_id: int, month: int, year: int) -> List[MonthlyAllocation]:
    """Return existing allocations for a period without creating any."""
    try:
        return list(
            MonthlyAllocation.objects
            .filter(user_id=user_id, month=month, year=year)
            .order_by('item_code')
        )
    except DatabaseError as e:
        logger.exception("Failed to read allocations for user %s", user_id)
        raise AllocationStorageError("Failed to load allocations") from e


def ensure_allocations(*, user_id: int, month: int, year: int) -> List[MonthlyAllocation]:
    """
    Return the user's allocations for a period, creating them if absent.

    Concurrent first reads may both try to insert the same rows; the
    unique (user, item_code, month, year) constraint keeps one set and
    the conflicting inserts are ignored before the re-read.

    Args:
        user_id: Cardholder ID
        month: Calendar month (1-12)
        year: Calendar year

    Returns:
        Allocations ordered by item_code. Empty if the user does not exist.

    Raises:
        AllocationStorageError: If the database fails
    """
    existing = get_allocations(user_id=user_id, month=month, year=year)
    if existing:
        return existing

    try:
        user = User.objects.filter(id=user_id).only('id', 'card_type', 'family_size').first()
        if user is None:
            return []

        entitlements = derive_allocations(user.card_type, user.family_size)
        with transaction.atomic():
            MonthlyAllocation.objects.bulk_create(
                [
                    MonthlyAllocation(
                        user_id=user.id,
                        item_code=entitlement.item_code,
                        month=month,
                        year=year,
                        eligible_quantity=entitlement.quantity,
                        collected_quantity=Decimal('0'),
                    )
                    for entitlement in entitlements
                ],
                ignore_conflicts=True,
            )
    except DatabaseError as e:
        logger.exception("Failed to create allocations for user %s", user_id)
        raise AllocationStorageError("Failed to load allocations") from e

    logger.info(
        "Created %d allocations for user %s (%02d/%d)",
        len(entitlements), user_id, month, year
    )
    return get_allocations(user_id=user_id, month=month, year=year)


def get_allocation_history(*, user_id: int, limit: int = 6) -> List[dict]:
    """
    Return the user's most recent allocation rows grouped by period.

    The newest ``limit`` rows are taken first and then grouped, so a
    period may appear with only some of its items.
    """
    rows = (
        MonthlyAllocation.objects
        .filter(user_id=user_id)
        .order_by('-year', '-month', 'item_code')[:limit]
    )

    grouped = {}
    for row in rows:
        period = f"{row.year}-{row.month:02d}"
        if period not in grouped:
            grouped[period] = {
                'period': period,
                'month': row.month,
                'year': row.year,
                'items': [],
            }
        grouped[period]['items'].append(row)

    return list(grouped.values())
