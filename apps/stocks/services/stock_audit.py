"""
Best-effort stock audit trail.

Recording an audit row must never fail the stock change it describes.
The insert runs in its own savepoint and the result is reported back as
an ``AuditOutcome`` for the caller to log.
"""

from decimal import Decimal
from typing import NamedTuple, Optional

from django.db import DatabaseError, transaction
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.stocks.models import StockItem, StockAuditLog


class AuditOutcome(NamedTuple):
    recorded: bool
    log: Optional[StockAuditLog] = None
    error: Optional[str] = None


def record_stock_audit(
    *,
    stock_item: StockItem,
    actor: User,
    change_type: str,
    old_quantity: Decimal,
    new_quantity: Decimal,
    reason: str = '',
    notes: str = ''
) -> AuditOutcome:
    """Append an audit row. Database errors are returned, not raised."""
    try:
        with transaction.atomic():
            log = StockAuditLog.objects.create(
                stock_item=stock_item,
                shop_id=stock_item.shop_id,
                item_code=stock_item.item_code,
                changed_by=actor,
                changed_by_role=actor.role,
                change_type=change_type,
                old_quantity=old_quantity,
                new_quantity=new_quantity,
                quantity_difference=new_quantity - old_quantity,
                reason=reason,
                notes=notes,
            )
    except DatabaseError as e:
        return AuditOutcome(recorded=False, error=str(e))

    return AuditOutcome(recorded=True, log=log)


def list_stock_audit(*, shop_id: str, limit: int = 50) -> QuerySet:
    return (
        StockAuditLog.objects
        .filter(shop_id=shop_id)
        .select_related('changed_by')
        .order_by('-created_at', '-id')[:limit]
    )
