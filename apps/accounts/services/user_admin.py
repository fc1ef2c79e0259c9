"""
Administrative user management.

Users are never deleted; admins change their profile, flag state and
activation instead.
"""

import logging
from typing import Optional

from django.db import transaction
from django.db.models import Case, Count, IntegerField, Q, QuerySet, Value, When

from apps.accounts.models import User, Role

from .exceptions import UserNotFoundError, UserUpdateError

logger = logging.getLogger(__name__)

EDITABLE_PROFILE_FIELDS = (
    'name',
    'mobile_number',
    'address',
    'district',
    'pincode',
    'language',
    'ration_card_number',
    'card_type',
    'family_size',
    'shop',
    'role',
)

ROLE_ORDER = Case(
    When(role=Role.ADMIN, then=Value(1)),
    When(role=Role.SHOPKEEPER, then=Value(2)),
    When(role=Role.CARDHOLDER, then=Value(3)),
    default=Value(4),
    output_field=IntegerField(),
)


def list_users(
    *,
    role: Optional[str] = None,
    shop_id: Optional[str] = None,
    flagged: Optional[bool] = None
) -> QuerySet:
    """
    Filtered user list.

    Ordered admins first, then shopkeepers, then cardholders; flagged
    users first within a role, then by shop and name.
    """
    queryset = User.objects.select_related('shop')

    if role:
        queryset = queryset.filter(role=role)
    if shop_id:
        queryset = queryset.filter(shop_id=shop_id)
    if flagged is not None:
        queryset = queryset.filter(is_flagged=flagged)

    return queryset.annotate(role_order=ROLE_ORDER).order_by(
        'role_order', '-is_flagged', 'shop_id', 'name', 'id'
    )


def get_user(*, user_id: int) -> User:
    try:
        return User.objects.select_related('shop', 'flagged_by').get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError("User not found")


@transaction.atomic
def update_user_profile(*, user_id: int, **fields) -> User:
    """
    Update profile fields of a user.

    Raises:
        UserNotFoundError: If the user does not exist
        UserUpdateError: If a field is not editable
    """
    unknown = set(fields) - set(EDITABLE_PROFILE_FIELDS)
    if unknown:
        raise UserUpdateError(f"Fields not editable: {', '.join(sorted(unknown))}")

    try:
        user = User.objects.select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError("User not found")

    for field, value in fields.items():
        setattr(user, field, value)
    user.save(update_fields=[*fields, 'updated_at'])

    return user


@transaction.atomic
def set_user_flag(
    *,
    user_id: int,
    is_flagged: bool,
    flagged_by: User,
    reason: Optional[str] = None
) -> User:
    """
    Flag or unflag a user. Admin accounts cannot be flagged.

    Raises:
        UserNotFoundError: If the user does not exist
        UserUpdateError: If the user is an admin
    """
    try:
        user = User.objects.select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError("User not found")

    if user.role == Role.ADMIN:
        raise UserUpdateError("Cannot flag admin users")

    if is_flagged:
        user.flag(flagged_by=flagged_by, reason=reason)
        logger.info("User %s flagged by %s: %s", user.id, flagged_by.id, user.flag_reason)
    else:
        user.unflag()
        logger.info("User %s unflagged by %s", user.id, flagged_by.id)

    return user


@transaction.atomic
def set_user_active(*, user_id: int, is_active: bool) -> User:
    try:
        user = User.objects.select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError("User not found")

    user.is_active = is_active
    user.save(update_fields=['is_active', 'updated_at'])
    return user


def get_user_stats_by_shop() -> QuerySet:
    """Per-shop counts of shopkeepers, cardholders and flagged users."""
    return (
        User.objects
        .filter(role__in=[Role.SHOPKEEPER, Role.CARDHOLDER])
        .values('shop_id', 'shop__name')
        .annotate(
            shopkeepers=Count('id', filter=Q(role=Role.SHOPKEEPER)),
            cardholders=Count('id', filter=Q(role=Role.CARDHOLDER)),
            flagged_users=Count('id', filter=Q(is_flagged=True)),
            flagged_shopkeepers=Count('id', filter=Q(role=Role.SHOPKEEPER, is_flagged=True)),
        )
        .order_by('shop__name')
    )
