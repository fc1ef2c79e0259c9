"""
Notification fan-out.

Notifications are scoped to a shop (or global when the shop is null).
Readers only ever see their own shop's rows and the global ones.
"""

from typing import List, Optional

from django.db.models import Q
from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.permissions import can_access_shop
from apps.shops.models import Shop

from .exceptions import (
    NotificationValidationError,
    NotificationNotFoundError,
    NotificationTargetNotFoundError,
    NotificationAccessError,
)
from .models import Notification

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def coerce_limit(value, default: int = DEFAULT_LIMIT, maximum: int = MAX_LIMIT) -> int:
    """
    Turn a client-supplied limit into an int in [1, maximum].

    Anything that is not a positive integer falls back to ``default``;
    larger values are capped at ``maximum``.
    """
    try:
        limit = int(value)
    except (TypeError, ValueError):
        return default
    if limit <= 0:
        return default
    return min(limit, maximum)


def list_notifications(*, shop_id: Optional[str], limit=DEFAULT_LIMIT) -> List[Notification]:
    """
    Newest-first notifications visible to a member of ``shop_id``.

    With a shop: that shop's rows plus global rows. Without: global only.
    """
    if shop_id:
        scope = Q(shop_id=shop_id) | Q(shop__isnull=True)
    else:
        scope = Q(shop__isnull=True)

    return list(
        Notification.objects
        .filter(scope)
        .order_by('-id')[:coerce_limit(limit)]
    )


def create_notification(
    *,
    type: str,
    message: str,
    shop_id: Optional[str] = None,
    user_id: Optional[int] = None
) -> Notification:
    """
    Create a notification.

    Raises:
        NotificationValidationError: If type or message is empty
        NotificationTargetNotFoundError: If the addressed user or shop does not exist
    """
    if not type or not message:
        raise NotificationValidationError("type and message are required")
    if shop_id and not Shop.objects.filter(id=shop_id).exists():
        raise NotificationTargetNotFoundError(f"Shop {shop_id} not found")
    if user_id and not User.objects.filter(id=user_id).exists():
        raise NotificationTargetNotFoundError(f"User {user_id} not found")

    return Notification.objects.create(
        shop_id=shop_id or None,
        user_id=user_id or None,
        type=type,
        message=message,
    )


def acknowledge_notification(*, notification_id: int, actor: Optional[User] = None) -> Notification:
    """
    Stamp ``acknowledged_at`` with the current time.

    Global notifications can be acknowledged by anyone; shop notifications
    only by that shop's members and admins.

    Raises:
        NotificationNotFoundError: If the notification does not exist
        NotificationAccessError: If ``actor`` cannot see the notification
    """
    try:
        notification = Notification.objects.get(id=notification_id)
    except Notification.DoesNotExist:
        raise NotificationNotFoundError("Notification not found")

    if (
        actor is not None
        and notification.shop_id is not None
        and not can_access_shop(actor, notification.shop_id)
    ):
        raise NotificationAccessError("You can only acknowledge your own shop's notifications")

    notification.acknowledged_at = timezone.now()
    notification.save(update_fields=['acknowledged_at'])
    return notification
