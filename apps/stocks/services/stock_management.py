"""
Stock inventory service.

Shopkeepers adjust on-hand stock by deltas or set it outright; admins
set the government allocation of a shop. On-hand quantities never go
below zero.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Tuple

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import User, Role
from apps.stocks.models import StockItem, StockChangeType

from .exceptions import StockItemNotFoundError, InvalidStockQuantityError
from .stock_audit import AuditOutcome, record_stock_audit

logger = logging.getLogger(__name__)

ZERO = Decimal('0')


def _to_decimal(value, *, allow_negative=False) -> Decimal:
    if value is None or isinstance(value, bool):
        raise InvalidStockQuantityError("Quantity must be a number")
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidStockQuantityError("Quantity must be a number")
    if not number.is_finite():
        raise InvalidStockQuantityError("Quantity must be a number")
    if not allow_negative and number < 0:
        raise InvalidStockQuantityError("Quantity cannot be negative")
    return number


def _lock_item(shop_id: str, item_code: str) -> StockItem:
    try:
        return (
            StockItem.objects
            .select_for_update()
            .get(shop_id=shop_id, item_code=item_code)
        )
    except StockItem.DoesNotExist:
        raise StockItemNotFoundError("Stock item not found")


def _log_audit_outcome(outcome: AuditOutcome, item: StockItem) -> None:
    if not outcome.recorded:
        logger.warning(
            "Stock audit not recorded for %s/%s: %s",
            item.shop_id, item.item_code, outcome.error
        )


def list_stock(*, shop_id: str) -> QuerySet:
    return StockItem.objects.filter(shop_id=shop_id).order_by('item_code')


@transaction.atomic
def apply_stock_delta(
    *,
    shop_id: str,
    item_code: str,
    delta,
    actor: User
) -> Tuple[StockItem, AuditOutcome]:
    """
    Add ``delta`` (may be negative) to the on-hand quantity, clamped at zero.

    Raises:
        InvalidStockQuantityError: If delta is not a number
        StockItemNotFoundError: If the shop does not stock the item
    """
    delta = _to_decimal(delta, allow_negative=True)
    item = _lock_item(shop_id, item_code)

    old_quantity = item.quantity
    item.quantity = max(ZERO, old_quantity + delta)
    item.save(update_fields=['quantity', 'updated_at'])

    outcome = record_stock_audit(
        stock_item=item,
        actor=actor,
        change_type=StockChangeType.DELTA_UPDATE,
        old_quantity=old_quantity,
        new_quantity=item.quantity,
    )
    _log_audit_outcome(outcome, item)

    return item, outcome


@transaction.atomic
def correct_stock(
    *,
    shop_id: str,
    item_code: str,
    quantity,
    actor: User,
    reason: str = ''
) -> Tuple[StockItem, AuditOutcome]:
    """
    Set the on-hand quantity to an absolute value.

    The audit row is typed ``admin_correction`` for admins and
    ``shopkeeper_update`` for everyone else.
    """
    new_quantity = _to_decimal(quantity)
    item = _lock_item(shop_id, item_code)

    old_quantity = item.quantity
    item.quantity = new_quantity
    item.save(update_fields=['quantity', 'updated_at'])

    if actor.role == Role.ADMIN:
        change_type = StockChangeType.ADMIN_CORRECTION
    else:
        change_type = StockChangeType.SHOPKEEPER_UPDATE

    outcome = record_stock_audit(
        stock_item=item,
        actor=actor,
        change_type=change_type,
        old_quantity=old_quantity,
        new_quantity=new_quantity,
        reason=reason,
    )
    _log_audit_outcome(outcome, item)

    logger.info("Stock %s/%s set to %s (was %s)", shop_id, item_code, new_quantity, old_quantity)
    return item, outcome


@transaction.atomic
def allocate_government_stock(
    *,
    shop_id: str,
    item_code: str,
    quantity,
    actor: User,
    reason: str = ''
) -> Tuple[StockItem, AuditOutcome]:
    """
    Set a shop's government allocation of an item.

    On-hand stock moves by the difference between the new and the old
    allocation (never below zero). The audit row records the allocation
    values, not the on-hand ones.
    """
    new_allocated = _to_decimal(quantity)
    item = _lock_item(shop_id, item_code)

    old_allocated = item.government_allocated
    item.government_allocated = new_allocated
    item.quantity = max(ZERO, item.quantity + (new_allocated - old_allocated))
    item.allocated_by = actor
    item.last_restocked = timezone.now()
    item.save(update_fields=[
        'government_allocated', 'quantity', 'allocated_by', 'last_restocked', 'updated_at'
    ])

    outcome = record_stock_audit(
        stock_item=item,
        actor=actor,
        change_type=StockChangeType.GOVERNMENT_ALLOCATION,
        old_quantity=old_allocated,
        new_quantity=new_allocated,
        reason=reason or 'Stock allocation',
    )
    _log_audit_outcome(outcome, item)

    return item, outcome
