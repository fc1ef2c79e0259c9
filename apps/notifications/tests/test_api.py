"""
API tests for notification endpoints, including the card-type broadcast.
"""

import pytest
from django.urls import reverse
from rest_framework import status

from apps.accounts.models import User, Role, CardType
from apps.notifications.models import Notification
from apps.notifications.services import create_notification
from apps.tokens.models import Token


@pytest.mark.django_db
class TestListNotificationsEndpoint:

    def test_scoped_to_callers_shop(self, cardholder_client, shop, other_shop):
        create_notification(shop_id='SHOP001', type='info', message='Own shop')
        create_notification(type='info', message='Everyone')
        create_notification(shop_id='SHOP002', type='info', message='Other shop')

        response = cardholder_client.get(reverse('notifications:notifications'))

        assert response.status_code == status.HTTP_200_OK
        assert [row['message'] for row in response.data] == ['Everyone', 'Own shop']

    def test_invalid_limit_falls_back_to_default(self, cardholder_client, shop):
        for i in range(25):
            create_notification(shop_id='SHOP001', type='info', message=f'm{i}')

        response = cardholder_client.get(reverse('notifications:notifications'), {'limit': 'abc'})

        assert len(response.data) == 20

    def test_requires_authentication(self, api_client):
        response = api_client.get(reverse('notifications:notifications'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestCreateNotificationEndpoint:

    def test_shopkeeper_defaults_to_own_shop(self, shopkeeper_client):
        response = shopkeeper_client.post(
            reverse('notifications:notifications'),
            {'type': 'stock', 'message': 'Sugar restocked'},
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['shop'] == 'SHOP001'

    def test_shopkeeper_cannot_target_other_shop(self, shopkeeper_client, other_shop):
        response = shopkeeper_client.post(
            reverse('notifications:notifications'),
            {'shopId': 'SHOP002', 'type': 'stock', 'message': 'Sugar restocked'},
            format='json'
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert Notification.objects.count() == 0

    def test_admin_can_create_global(self, admin_client):
        response = admin_client.post(
            reverse('notifications:notifications'),
            {'type': 'info', 'message': 'Offices closed'},
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['shop'] is None

    def test_missing_message(self, admin_client):
        response = admin_client.post(
            reverse('notifications:notifications'),
            {'type': 'info'},
            format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'type and message are required'

    def test_cardholder_cannot_create(self, cardholder_client):
        response = cardholder_client.post(
            reverse('notifications:notifications'),
            {'type': 'info', 'message': 'hi'},
            format='json'
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_unknown_user_target(self, admin_client):
        response = admin_client.post(
            reverse('notifications:notifications'),
            {'type': 'info', 'message': 'hi', 'userId': 999999},
            format='json'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert Notification.objects.count() == 0


@pytest.mark.django_db
class TestAcknowledgeEndpoint:

    def test_acknowledge(self, cardholder_client, shop):
        notification = create_notification(shop_id='SHOP001', type='info', message='hello')

        response = cardholder_client.patch(
            reverse('notifications:ack', kwargs={'notification_id': notification.id})
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['acknowledged_at'] is not None

    def test_unknown(self, cardholder_client):
        response = cardholder_client.patch(
            reverse('notifications:ack', kwargs={'notification_id': 99999})
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_other_shops_notification_forbidden(self, cardholder_client, other_shop):
        notification = create_notification(shop_id='SHOP002', type='info', message='hello')

        response = cardholder_client.patch(
            reverse('notifications:ack', kwargs={'notification_id': notification.id})
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        notification.refresh_from_db()
        assert notification.acknowledged_at is None


@pytest.mark.django_db
class TestBroadcastEndpoint:

    def post(self, client, data):
        return client.post(reverse('notifications:broadcast-card-type'), data, format='json')

    def test_broadcast_for_own_shop(self, shopkeeper_client, shop, cardholder):
        User.objects.create_user(
            email='phh2@example.com', role=Role.CARDHOLDER, shop=shop, card_type=CardType.PHH
        )

        response = self.post(shopkeeper_client, {
            'cardType': 'PHH',
            'startAt': '2025-03-10T10:00:00+05:30',
        })

        assert response.status_code == status.HTTP_200_OK
        assert response.data['created'] == 2
        assert response.data['recipients'] == 2
        assert [s['time_slot'] for s in response.data['slots']] == ['10:00 AM', '10:15 AM']
        assert Token.objects.filter(shop=shop).count() == 2
        assert Notification.objects.filter(shop=shop, type='token').count() == 2

    def test_shopkeeper_shop_id_is_ignored(self, shopkeeper_client, other_shop, cardholder):
        User.objects.create_user(
            email='far@example.com', role=Role.CARDHOLDER, shop=other_shop, card_type=CardType.PHH
        )

        response = self.post(shopkeeper_client, {'cardType': 'PHH', 'shopId': 'SHOP002'})

        assert response.data['created'] == 1
        assert not Token.objects.filter(shop=other_shop).exists()

    def test_invalid_card_type(self, shopkeeper_client):
        response = self.post(shopkeeper_client, {'cardType': 'XYZ'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert Token.objects.count() == 0

    def test_invalid_start(self, shopkeeper_client):
        response = self.post(shopkeeper_client, {'cardType': 'PHH', 'startAt': 'yesterday'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_admin_without_shop(self, admin_client):
        response = self.post(admin_client, {'cardType': 'PHH'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Missing shopId in user session'

    def test_cardholder_forbidden(self, cardholder_client):
        response = self.post(cardholder_client, {'cardType': 'PHH'})

        assert response.status_code == status.HTTP_403_FORBIDDEN
