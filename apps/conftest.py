import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, Role, CardType
from apps.shops.models import Shop


def authenticate(client, user):
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def shop(db):
    return Shop.objects.create(
        id='SHOP001',
        name='Fair Price Shop 1',
        district='Lucknow',
        address='Main Market',
    )


@pytest.fixture
def other_shop(db):
    return Shop.objects.create(
        id='SHOP002',
        name='Fair Price Shop 2',
        district='Kanpur',
        address='Station Road',
    )


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email='admin@example.com',
        name='Admin User',
        role=Role.ADMIN,
    )


@pytest.fixture
def shopkeeper(db, shop):
    return User.objects.create_user(
        email='shopkeeper@example.com',
        name='Ramesh Kumar',
        role=Role.SHOPKEEPER,
        shop=shop,
    )


@pytest.fixture
def other_shopkeeper(db, other_shop):
    return User.objects.create_user(
        email='shopkeeper2@example.com',
        name='Suresh Yadav',
        role=Role.SHOPKEEPER,
        shop=other_shop,
    )


@pytest.fixture
def cardholder(db, shop):
    """PHH cardholder with a family of four."""
    return User.objects.create_user(
        email='cardholder@example.com',
        name='Mohan Lal',
        role=Role.CARDHOLDER,
        shop=shop,
        card_type=CardType.PHH,
        family_size=4,
        ration_card_number='PHH0000001',
    )


@pytest.fixture
def admin_client(admin_user):
    """Return API client authenticated as admin."""
    return authenticate(APIClient(), admin_user)


@pytest.fixture
def shopkeeper_client(shopkeeper):
    """Return API client authenticated as shopkeeper of SHOP001."""
    return authenticate(APIClient(), shopkeeper)


@pytest.fixture
def cardholder_client(cardholder):
    """Return API client authenticated as cardholder."""
    return authenticate(APIClient(), cardholder)
