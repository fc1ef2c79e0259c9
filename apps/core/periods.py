"""Calendar period helpers for monthly allocations."""

from typing import NamedTuple, Optional
from datetime import date

from django.utils import timezone


class Period(NamedTuple):
    month: int
    year: int


def current_period(today: Optional[date] = None) -> Period:
    """Return the (month, year) the wall clock is in, in the configured timezone."""
    today = today or timezone.localdate()
    return Period(month=today.month, year=today.year)
