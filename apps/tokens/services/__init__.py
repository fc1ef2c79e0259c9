"""
Tokens app services layer.

Queue-token booking and bulk broadcast. Queue positions are gap-free
per shop and date.
"""

from .exceptions import (
    TokensServiceError,
    ShopRequiredError,
    InvalidTokenStatusError,
    InvalidBroadcastError,
    TokenNotFoundError,
    TokenAccessError,
    TokenStorageError,
)
from .slots import (
    round_up_to_quarter_hour,
    format_slot,
    generate_token_id,
    generate_booking_id,
)
from .booking import (
    next_queue_position,
    book_token,
    get_my_token,
    list_shop_tokens,
    update_token_status,
)
from .broadcast import (
    BroadcastSlot,
    BroadcastResult,
    broadcast_by_card_type,
)

__all__ = [
    # Exceptions
    'TokensServiceError',
    'ShopRequiredError',
    'InvalidTokenStatusError',
    'InvalidBroadcastError',
    'TokenNotFoundError',
    'TokenAccessError',
    'TokenStorageError',
    # Slots
    'round_up_to_quarter_hour',
    'format_slot',
    'generate_token_id',
    'generate_booking_id',
    # Booking
    'next_queue_position',
    'book_token',
    'get_my_token',
    'list_shop_tokens',
    'update_token_status',
    # Broadcast
    'BroadcastSlot',
    'BroadcastResult',
    'broadcast_by_card_type',
]
