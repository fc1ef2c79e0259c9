"""
Token booking service.

Queue positions come from a per-shop, per-day counter row that is locked
while a position is taken, so concurrent bookings never share a position
and a rolled back booking leaves no gap.
"""

import logging
from datetime import date
from typing import Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.permissions import can_access_shop
from apps.tokens.models import Token, TokenStatus, QueueCounter

from .exceptions import (
    ShopRequiredError,
    InvalidTokenStatusError,
    TokenNotFoundError,
    TokenAccessError,
    TokenStorageError,
)
from .slots import generate_booking_id

logger = logging.getLogger(__name__)

BOOKING_ID_ATTEMPTS = 3


def next_queue_position(*, shop_id: str, on_date: date) -> int:
    """
    Take the next queue position for a shop and date.

    Must run inside a transaction. A counter created for the first time
    starts from the number of tokens already on that date.
    """
    counter, _ = (
        QueueCounter.objects
        .select_for_update()
        .get_or_create(
            shop_id=shop_id,
            date=on_date,
            defaults={
                'last_position': Token.objects.filter(shop_id=shop_id, token_date=on_date).count()
            },
        )
    )
    counter.last_position += 1
    counter.save(update_fields=['last_position'])
    return counter.last_position


def _insert_token(*, shop_id, user, token_date, time_slot, position) -> Token:
    """Insert under a fresh id, retrying in a savepoint when the id is taken."""
    for attempt in range(1, BOOKING_ID_ATTEMPTS + 1):
        token_id = generate_booking_id()
        try:
            with transaction.atomic():
                return Token.objects.create(
                    id=token_id,
                    shop_id=shop_id,
                    user=user,
                    token_date=token_date,
                    time_slot=time_slot,
                    queue_position=position,
                    status=TokenStatus.ACTIVE,
                )
        except IntegrityError:
            if attempt == BOOKING_ID_ATTEMPTS:
                raise
            logger.warning("Token id %s already taken, retrying", token_id)


def book_token(
    *,
    shop_id: Optional[str],
    user: User,
    token_date: Optional[date] = None,
    time_slot: Optional[str] = None
) -> Token:
    """
    Book an active token for a user at a shop.

    Args:
        shop_id: Shop the user visits
        user: Cardholder booking the visit
        token_date: Visit date, defaults to today (local time)
        time_slot: Display slot, defaults to ``TOKEN_DEFAULT_TIME_SLOT``

    Returns:
        Created Token

    Raises:
        ShopRequiredError: If no shop is given
        TokenStorageError: If no free token id is found or the insert fails
    """
    if not shop_id:
        raise ShopRequiredError("Missing shopId")

    token_date = token_date or timezone.localdate()
    time_slot = time_slot or settings.TOKEN_DEFAULT_TIME_SLOT

    try:
        with transaction.atomic():
            position = next_queue_position(shop_id=shop_id, on_date=token_date)
            token = _insert_token(
                shop_id=shop_id,
                user=user,
                token_date=token_date,
                time_slot=time_slot,
                position=position,
            )
    except IntegrityError as e:
        logger.exception("Failed to book token for user %s at %s", user.id, shop_id)
        raise TokenStorageError("Failed to create token") from e

    logger.info("Booked token %s (#%d) for user %s at %s", token.id, position, user.id, shop_id)
    return token


def get_my_token(*, user: User, on_date: Optional[date] = None) -> Optional[Token]:
    """The user's most recent token for a date (today by default), or None."""
    on_date = on_date or timezone.localdate()
    return (
        Token.objects
        .filter(user=user, token_date=on_date)
        .order_by('-created_at', '-queue_position', '-id')
        .first()
    )


def list_shop_tokens(*, shop_id: str, limit: int = 100) -> QuerySet:
    return (
        Token.objects
        .filter(shop_id=shop_id)
        .select_related('user')
        .order_by('-created_at', '-queue_position', '-id')[:limit]
    )


@transaction.atomic
def update_token_status(*, token_id: str, status: str, actor: Optional[User] = None) -> Token:
    """
    Set a token's status. When ``actor`` is given it must be an admin or
    belong to the token's shop.

    Raises:
        InvalidTokenStatusError: If status is not a TokenStatus value
        TokenNotFoundError: If the token does not exist
        TokenAccessError: If the actor may not touch the token's shop
    """
    if status not in TokenStatus.values:
        raise InvalidTokenStatusError(f"Invalid status: {status}")

    try:
        token = Token.objects.select_for_update().get(id=token_id)
    except Token.DoesNotExist:
        raise TokenNotFoundError("Token not found")

    if actor is not None and not can_access_shop(actor, token.shop_id):
        raise TokenAccessError("You can only update tokens of your own shop")

    token.status = status
    token.save(update_fields=['status', 'updated_at'])
    return token
