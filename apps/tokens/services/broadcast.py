"""
Token broadcast by card type.

Lays out fixed-width visit slots for every active cardholder of one card
type at a shop, creates a pending token per slot and notifies each
recipient.
"""

import logging
from datetime import datetime, timedelta, timezone as dt_timezone
from typing import List, NamedTuple, Optional

from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.accounts.models import User, Role, CardType
from apps.notifications.services import create_notification
from apps.tokens.models import Token, TokenStatus

from .booking import next_queue_position
from .exceptions import InvalidBroadcastError, ShopRequiredError
from .slots import round_up_to_quarter_hour, format_slot, generate_token_id, to_local

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_MINUTES = 15
NOTIFICATION_TYPE = 'token'


class BroadcastSlot(NamedTuple):
    user_id: int
    token_id: str
    time_slot: str
    date: str
    queue_position: int


class BroadcastResult(NamedTuple):
    created: int
    recipients: int
    card_type: str
    start_at: datetime
    interval_minutes: int
    slots: List[BroadcastSlot]


def token_message(card_type: str, slot_date: str, time_slot: str) -> str:
    return (
        f"Dear {card_type} cardholder, your token has been created for "
        f"{slot_date} at {time_slot}. Please visit the shop at your "
        f"assigned 15-minute slot."
    )


@transaction.atomic
def broadcast_by_card_type(
    *,
    shop_id: Optional[str],
    card_type: str,
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
    start_at: Optional[datetime] = None
) -> BroadcastResult:
    """
    Create tokens for all active cardholders of a card type at a shop.

    Recipient ``i`` (ordered by id) gets the slot ``start + i * interval``.
    The token date is the local date of the slot, and the queue position
    is taken from that date's counter, so a broadcast running past
    midnight starts numbering again on the new day.

    A token whose insert fails (an id collision) is skipped and its
    recipient gets no notification; the remaining recipients are still
    processed.

    Args:
        shop_id: Shop issuing the tokens
        card_type: One of ``CardType``
        interval_minutes: Width of each slot
        start_at: First slot, defaults to now; rounded up to a quarter hour

    Returns:
        BroadcastResult describing the created tokens

    Raises:
        ShopRequiredError: If no shop is given
        InvalidBroadcastError: If the card type or interval is invalid
    """
    if not shop_id:
        raise ShopRequiredError("Missing shopId")
    if card_type not in CardType.values:
        raise InvalidBroadcastError("Invalid or missing cardType")
    if not isinstance(interval_minutes, int) or interval_minutes <= 0:
        raise InvalidBroadcastError("intervalMinutes must be a positive integer")

    now = timezone.now()
    start = round_up_to_quarter_hour(start_at or now)
    start_utc = start.astimezone(dt_timezone.utc)

    recipients = list(
        User.objects
        .filter(role=Role.CARDHOLDER, shop_id=shop_id, card_type=card_type, is_active=True)
        .order_by('id')
    )

    slots = []
    for index, recipient in enumerate(recipients):
        slot_at = to_local(start_utc + timedelta(minutes=index * interval_minutes))
        slot_date = slot_at.date()
        time_slot = format_slot(slot_at)
        token_id = generate_token_id(now, index=index)

        try:
            with transaction.atomic():
                position = next_queue_position(shop_id=shop_id, on_date=slot_date)
                Token.objects.create(
                    id=token_id,
                    shop_id=shop_id,
                    user=recipient,
                    token_date=slot_date,
                    time_slot=time_slot,
                    queue_position=position,
                    status=TokenStatus.PENDING,
                )
        except IntegrityError:
            logger.warning(
                "Skipped token %s for user %s: insert failed", token_id, recipient.id
            )
            continue

        create_notification(
            shop_id=shop_id,
            user_id=recipient.id,
            type=NOTIFICATION_TYPE,
            message=token_message(card_type, slot_date.isoformat(), time_slot),
        )
        slots.append(BroadcastSlot(
            user_id=recipient.id,
            token_id=token_id,
            time_slot=time_slot,
            date=slot_date.isoformat(),
            queue_position=position,
        ))

    logger.info(
        "Broadcast %s tokens at %s: %d of %d recipients",
        card_type, shop_id, len(slots), len(recipients)
    )

    return BroadcastResult(
        created=len(slots),
        recipients=len(recipients),
        card_type=card_type,
        start_at=start,
        interval_minutes=interval_minutes,
        slots=slots,
    )
