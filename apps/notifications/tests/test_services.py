"""
Service layer tests for notifications app.
"""

import pytest

from apps.notifications.exceptions import (
    NotificationValidationError,
    NotificationNotFoundError,
    NotificationTargetNotFoundError,
    NotificationAccessError,
)
from apps.notifications.models import Notification
from apps.notifications.services import (
    coerce_limit,
    list_notifications,
    create_notification,
    acknowledge_notification,
)


class TestCoerceLimit:

    @pytest.mark.parametrize('value, expected', [
        (None, 20),
        ('abc', 20),
        ('0', 20),
        (-5, 20),
        ('7', 7),
        (100, 100),
        (500, 100),
    ])
    def test_coerce(self, value, expected):
        assert coerce_limit(value) == expected


@pytest.mark.django_db
class TestListNotifications:

    def test_shop_sees_own_and_global_only(self, shop, other_shop):
        own = create_notification(shop_id='SHOP001', type='info', message='Rice arrived')
        global_row = create_notification(type='info', message='Holiday on Monday')
        create_notification(shop_id='SHOP002', type='info', message='Other shop')

        rows = list_notifications(shop_id='SHOP001')

        assert [n.id for n in rows] == [global_row.id, own.id]

    def test_without_shop_only_global(self, shop):
        create_notification(shop_id='SHOP001', type='info', message='Rice arrived')
        global_row = create_notification(type='info', message='Holiday on Monday')

        assert [n.id for n in list_notifications(shop_id=None)] == [global_row.id]

    def test_limit(self, shop):
        for i in range(5):
            create_notification(shop_id='SHOP001', type='info', message=f'Message {i}')

        rows = list_notifications(shop_id='SHOP001', limit='2')

        assert [n.message for n in rows] == ['Message 4', 'Message 3']


@pytest.mark.django_db
class TestCreateNotification:

    def test_targets_user(self, shop, cardholder):
        notification = create_notification(
            shop_id='SHOP001', user_id=cardholder.id, type='token', message='Your slot'
        )

        assert notification.user_id == cardholder.id
        assert notification.is_sent is False
        assert notification.acknowledged_at is None

    @pytest.mark.parametrize('type_, message', [('', 'text'), ('info', ''), (None, None)])
    def test_type_and_message_required(self, db, type_, message):
        with pytest.raises(NotificationValidationError, match='type and message are required'):
            create_notification(type=type_, message=message)

        assert Notification.objects.count() == 0

    @pytest.mark.parametrize('target', [{'user_id': 999999}, {'shop_id': 'SHOP404'}])
    def test_unknown_target(self, shop, target):
        with pytest.raises(NotificationTargetNotFoundError):
            create_notification(type='info', message='hi', **target)

        assert Notification.objects.count() == 0


@pytest.mark.django_db
class TestAcknowledge:

    def test_sets_timestamp(self, shop):
        notification = create_notification(shop_id='SHOP001', type='info', message='hello')

        acknowledged = acknowledge_notification(notification_id=notification.id)

        assert acknowledged.acknowledged_at is not None

    def test_unknown_notification(self, db):
        with pytest.raises(NotificationNotFoundError):
            acknowledge_notification(notification_id=424242)

    def test_other_shops_member_refused(self, shop, other_shopkeeper):
        notification = create_notification(shop_id='SHOP001', type='info', message='hello')

        with pytest.raises(NotificationAccessError):
            acknowledge_notification(notification_id=notification.id, actor=other_shopkeeper)

        notification.refresh_from_db()
        assert notification.acknowledged_at is None

    def test_global_open_to_everyone(self, other_shopkeeper):
        notification = create_notification(type='info', message='Holiday on Monday')

        acknowledged = acknowledge_notification(
            notification_id=notification.id, actor=other_shopkeeper
        )

        assert acknowledged.acknowledged_at is not None
