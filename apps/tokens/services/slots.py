"""Time-slot helpers for queue tokens. Slots are shown in local time."""

import secrets
from datetime import datetime, timedelta

from django.utils import timezone

QUARTER_HOUR = 15
BOOKING_ID_SUFFIX_BYTES = 3


def to_local(dt: datetime) -> datetime:
    if timezone.is_naive(dt):
        dt = timezone.make_aware(dt)
    return timezone.localtime(dt)


def round_up_to_quarter_hour(dt: datetime) -> datetime:
    """
    Round up to the next multiple of 15 minutes with zero seconds.

    A time already exactly on a quarter hour is returned unchanged. On a
    boundary minute with stray seconds (10:15:30) the seconds are dropped,
    so the result can be slightly earlier than the input.
    """
    dt = to_local(dt)
    remainder = dt.minute % QUARTER_HOUR
    if remainder == 0 and dt.second == 0 and dt.microsecond == 0:
        return dt

    add = 0 if remainder == 0 else QUARTER_HOUR - remainder
    return dt.replace(second=0, microsecond=0) + timedelta(minutes=add)


def format_slot(dt: datetime) -> str:
    """Format as ``H:MM AM`` in local time, e.g. ``9:15 AM`` or ``12:00 PM``."""
    dt = to_local(dt)
    hours = dt.hour % 12 or 12
    suffix = 'PM' if dt.hour >= 12 else 'AM'
    return f"{hours}:{dt.minute:02d} {suffix}"


def generate_token_id(now: datetime = None, index: int = None) -> str:
    """``T`` + epoch milliseconds, with a 4-digit index suffix for broadcasts."""
    now = now or timezone.now()
    token_id = f"T{int(now.timestamp() * 1000)}"
    if index is not None:
        token_id += f"{index:04d}"
    return token_id


def generate_booking_id(now: datetime = None) -> str:
    """``T`` + epoch milliseconds + 6 random hex digits, for single bookings."""
    return generate_token_id(now) + secrets.token_hex(BOOKING_ID_SUFFIX_BYTES)
