"""
Entitlement policy.

Maps a ration-card category and family size to the monthly quantity of
each item the household is eligible for. Pure functions, no database.
"""

from decimal import Decimal, ROUND_CEILING
from typing import List, NamedTuple, Optional

from apps.accounts.models import CardType, DEFAULT_FAMILY_SIZE
from apps.allocations.models import ItemCode


class ItemEntitlement(NamedTuple):
    item_code: str
    quantity: Decimal


# Flat ration for Antyodaya households
AAY_RATION = {
    ItemCode.RICE: Decimal('35'),
    ItemCode.WHEAT: Decimal('0'),
    ItemCode.SUGAR: Decimal('5'),
}

PHH_KG_PER_MEMBER = Decimal('5')
BPL_KG_PER_MEMBER = Decimal('5')
APL_KG_PER_MEMBER = Decimal('3')
APL_SUGAR = Decimal('2')
MAX_PHH_SUGAR = 5


def _ceil(value: Decimal) -> Decimal:
    return value.to_integral_value(rounding=ROUND_CEILING)


def _split(total: Decimal, rice_share: str, wheat_share: str):
    return _ceil(total * Decimal(rice_share)), _ceil(total * Decimal(wheat_share))


def derive_allocations(
    card_type: Optional[str],
    family_size: Optional[int] = None
) -> List[ItemEntitlement]:
    """
    Derive monthly entitlements for a household.

    Args:
        card_type: One of ``CardType``; unknown or missing values are
            treated as APL
        family_size: Household members; missing values count as 4

    Returns:
        Entitlements with a positive quantity, in rice, wheat, sugar order.
        Items that work out to zero are left out.
    """
    size = Decimal(family_size or DEFAULT_FAMILY_SIZE)

    match card_type:
        case CardType.AAY:
            quantities = dict(AAY_RATION)
        case CardType.PHH:
            rice, wheat = _split(size * PHH_KG_PER_MEMBER, '0.6', '0.4')
            quantities = {
                ItemCode.RICE: rice,
                ItemCode.WHEAT: wheat,
                ItemCode.SUGAR: min(size, Decimal(MAX_PHH_SUGAR)),
            }
        case CardType.BPL:
            rice, wheat = _split(size * BPL_KG_PER_MEMBER, '0.7', '0.3')
            quantities = {
                ItemCode.RICE: rice,
                ItemCode.WHEAT: wheat,
            }
        case _:
            rice, wheat = _split(size * APL_KG_PER_MEMBER, '0.6', '0.4')
            quantities = {
                ItemCode.RICE: rice,
                ItemCode.WHEAT: wheat,
                ItemCode.SUGAR: APL_SUGAR,
            }

    return [
        ItemEntitlement(item_code=str(item_code), quantity=quantity)
        for item_code, quantity in quantities.items()
        if quantity > 0
    ]
