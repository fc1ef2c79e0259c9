"""
Administrative overrides of eligible quantities.
"""

import logging
from typing import Iterable, List, Mapping

from django.db import transaction

from apps.accounts.models import User, Role
from apps.allocations.models import MonthlyAllocation

from .exceptions import (
    AllocationOverrideError,
    AllocationUserNotFoundError,
)
from .quota_distribution import parse_quantity

logger = logging.getLogger(__name__)


@transaction.atomic
def set_eligible_allocations(
    *,
    user_id: int,
    items: Iterable[Mapping],
    actor: User,
    month: int,
    year: int
) -> List[MonthlyAllocation]:
    """
    Overwrite eligible quantities for a cardholder's period.

    Each entry of ``items`` carries ``item_code`` and ``eligible_quantity``.
    Missing rows are created. An eligible quantity below what was already
    collected is rejected and nothing is written.

    Raises:
        AllocationUserNotFoundError: If the user does not exist
        AllocationOverrideError: If the user is not a cardholder, or an
            eligible quantity would drop below the collected one
        InvalidQuantityError: If a quantity is not a non-negative number
    """
    try:
        user = User.objects.get(id=user_id)
    except User.DoesNotExist:
        raise AllocationUserNotFoundError("User not found")

    if user.role != Role.CARDHOLDER:
        raise AllocationOverrideError("Can only update allocations for cardholders")

    for item in items:
        item_code = item['item_code']
        eligible = parse_quantity(item['eligible_quantity'])

        allocation = (
            MonthlyAllocation.objects
            .select_for_update()
            .filter(user=user, item_code=item_code, month=month, year=year)
            .first()
        )
        if allocation is None:
            MonthlyAllocation.objects.create(
                user=user,
                item_code=item_code,
                month=month,
                year=year,
                eligible_quantity=eligible,
                last_modified_by=actor,
                modification_reason='Admin override',
            )
            continue

        if eligible < allocation.collected_quantity:
            raise AllocationOverrideError(
                f"Eligible quantity for {item_code} cannot be below the "
                f"collected quantity ({allocation.collected_quantity})"
            )

        allocation.eligible_quantity = eligible
        allocation.last_modified_by = actor
        allocation.modification_reason = 'Admin override'
        allocation.save(update_fields=[
            'eligible_quantity', 'last_modified_by', 'modification_reason', 'updated_at'
        ])

    logger.info("Updated allocations for user %s (%02d/%d) by %s", user_id, month, year, actor.id)

    return list(
        MonthlyAllocation.objects
        .filter(user=user, month=month, year=year)
        .order_by('item_code')
    )
