import pytest

from apps.core.exceptions import NotFoundError, StorageError, ValidationError, AuthError
from apps.accounts.services.exceptions import InvalidCodeError, UserNotFoundError
from apps.allocations.services.exceptions import QuotaExceededError, AllocationStorageError
from apps.notifications.exceptions import NotificationNotFoundError
from apps.stocks.services.exceptions import InvalidStockQuantityError
from apps.tokens.services.exceptions import ShopRequiredError


@pytest.mark.parametrize('error_class, kind', [
    (InvalidCodeError, AuthError),
    (UserNotFoundError, NotFoundError),
    (QuotaExceededError, ValidationError),
    (AllocationStorageError, StorageError),
    (NotificationNotFoundError, NotFoundError),
    (InvalidStockQuantityError, ValidationError),
    (ShopRequiredError, ValidationError),
])
def test_domain_errors_map_to_a_kind(error_class, kind):
    assert issubclass(error_class, kind)
