import pytest
from decimal import Decimal

from apps.stocks.models import StockItem


@pytest.fixture
def rice_stock(shop):
    return StockItem.objects.create(
        shop=shop,
        item_code='rice',
        item_name='Rice',
        item_name_hindi='चावल',
        quantity=Decimal('100'),
        government_allocated=Decimal('100'),
    )


@pytest.fixture
def other_shop_stock(other_shop):
    return StockItem.objects.create(
        shop=other_shop,
        item_code='rice',
        item_name='Rice',
        quantity=Decimal('40'),
    )
