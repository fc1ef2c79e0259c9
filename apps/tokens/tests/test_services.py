"""
Service layer tests for tokens app.

Tests cover:
- Slot rounding and formatting
- Gap-free queue positions per shop and date
- Broadcast slot layout, notifications and collision handling
"""

import pytest
from datetime import date, datetime, timedelta, timezone as dt_timezone
from unittest.mock import patch

from django.test import override_settings
from django.utils import timezone

from apps.accounts.models import User, Role, CardType
from apps.notifications.models import Notification
from apps.tokens.models import Token, TokenStatus, QueueCounter
from apps.tokens.services import (
    round_up_to_quarter_hour,
    format_slot,
    generate_token_id,
    generate_booking_id,
    next_queue_position,
    book_token,
    get_my_token,
    list_shop_tokens,
    update_token_status,
    broadcast_by_card_type,
)
from apps.tokens.services.exceptions import (
    ShopRequiredError,
    InvalidTokenStatusError,
    InvalidBroadcastError,
    TokenNotFoundError,
    TokenAccessError,
    TokenStorageError,
)


def local(*args):
    """Aware datetime in the configured local timezone."""
    return timezone.make_aware(datetime(*args))


def make_cardholder(shop, email, card_type=CardType.PHH, **extra):
    return User.objects.create_user(
        email=email, role=Role.CARDHOLDER, shop=shop, card_type=card_type, **extra
    )


# =============================================================================
# Slots
# =============================================================================

class TestSlots:

    @pytest.mark.parametrize('given, expected', [
        ((2025, 3, 10, 10, 7), (2025, 3, 10, 10, 15)),
        ((2025, 3, 10, 10, 0), (2025, 3, 10, 10, 0)),
        ((2025, 3, 10, 10, 46), (2025, 3, 10, 11, 0)),
        ((2025, 3, 10, 23, 52), (2025, 3, 11, 0, 0)),
    ])
    def test_round_up_to_quarter_hour(self, given, expected):
        assert round_up_to_quarter_hour(local(*given)) == local(*expected)

    def test_round_up_drops_seconds(self):
        assert round_up_to_quarter_hour(local(2025, 3, 10, 10, 15, 30)) == local(2025, 3, 10, 10, 15)
        assert round_up_to_quarter_hour(local(2025, 3, 10, 10, 14, 59)) == local(2025, 3, 10, 10, 15)

    @pytest.mark.parametrize('hour, minute, expected', [
        (9, 15, '9:15 AM'),
        (0, 0, '12:00 AM'),
        (12, 0, '12:00 PM'),
        (13, 5, '1:05 PM'),
        (23, 45, '11:45 PM'),
    ])
    def test_format_slot(self, hour, minute, expected):
        assert format_slot(local(2025, 3, 10, hour, minute)) == expected

    def test_format_slot_uses_local_time(self):
        # 04:30 UTC is 10:00 in Asia/Kolkata
        utc = datetime(2025, 3, 10, 4, 30, tzinfo=dt_timezone.utc)

        with timezone.override('Asia/Kolkata'):
            assert format_slot(utc) == '10:00 AM'

    def test_generate_token_id(self):
        now = datetime(2025, 3, 10, 4, 30, tzinfo=dt_timezone.utc)
        millis = int(now.timestamp() * 1000)

        assert generate_token_id(now) == f'T{millis}'
        assert generate_token_id(now, index=7) == f'T{millis}0007'

    def test_generate_booking_id_adds_random_suffix(self):
        now = datetime(2025, 3, 10, 4, 30, tzinfo=dt_timezone.utc)
        millis = int(now.timestamp() * 1000)

        first = generate_booking_id(now)
        second = generate_booking_id(now)

        assert first.startswith(f'T{millis}')
        assert len(first) == len(f'T{millis}') + 6
        assert first != second


# =============================================================================
# Booking
# =============================================================================

@pytest.mark.django_db
class TestBooking:

    def test_positions_are_sequential(self, shop, cardholder):
        tokens = [book_token(shop_id=shop.id, user=cardholder) for _ in range(4)]

        assert [t.queue_position for t in tokens] == [1, 2, 3, 4]
        assert all(t.status == TokenStatus.ACTIVE for t in tokens)
        assert tokens[0].token_date == timezone.localdate()

    def test_default_time_slot(self, shop, cardholder):
        with override_settings(TOKEN_DEFAULT_TIME_SLOT='9:30 AM'):
            token = book_token(shop_id=shop.id, user=cardholder)

        assert token.time_slot == '9:30 AM'

    def test_positions_are_per_shop_and_date(self, shop, other_shop, cardholder):
        day = date(2025, 3, 10)

        first = book_token(shop_id=shop.id, user=cardholder, token_date=day)
        other = book_token(shop_id=other_shop.id, user=cardholder, token_date=day)
        next_day = book_token(shop_id=shop.id, user=cardholder, token_date=day + timedelta(days=1))
        second = book_token(shop_id=shop.id, user=cardholder, token_date=day)

        assert (first.queue_position, other.queue_position) == (1, 1)
        assert next_day.queue_position == 1
        assert second.queue_position == 2

    def test_counter_starts_after_existing_tokens(self, shop, cardholder):
        day = date(2025, 3, 10)
        Token.objects.create(
            id='TLEGACY1', shop=shop, user=cardholder, token_date=day,
            time_slot='10:00 AM', queue_position=1,
        )

        token = book_token(shop_id=shop.id, user=cardholder, token_date=day)

        assert token.queue_position == 2
        assert QueueCounter.objects.get(shop=shop, date=day).last_position == 2

    def test_failed_insert_leaves_no_gap(self, shop, cardholder):
        day = date(2025, 3, 10)
        ids = iter(['TDUP', 'TDUP', 'TDUP', 'TDUP', 'TNEXT'])
        with patch(
            'apps.tokens.services.booking.generate_booking_id',
            side_effect=lambda *args, **kwargs: next(ids),
        ):
            book_token(shop_id=shop.id, user=cardholder, token_date=day)
            with pytest.raises(TokenStorageError):
                book_token(shop_id=shop.id, user=cardholder, token_date=day)
            token = book_token(shop_id=shop.id, user=cardholder, token_date=day)

        assert token.queue_position == 2

    def test_taken_id_is_retried(self, shop, cardholder):
        day = date(2025, 3, 10)
        ids = iter(['TDUP', 'TDUP', 'TFRESH'])
        with patch(
            'apps.tokens.services.booking.generate_booking_id',
            side_effect=lambda *args, **kwargs: next(ids),
        ):
            book_token(shop_id=shop.id, user=cardholder, token_date=day)
            token = book_token(shop_id=shop.id, user=cardholder, token_date=day)

        assert token.id == 'TFRESH'
        assert token.queue_position == 2

    def test_same_millisecond_bookings_get_distinct_ids(self, shop, cardholder):
        other = make_cardholder(shop, 'neighbour@example.com')
        instant = datetime(2025, 3, 10, 4, 30, tzinfo=dt_timezone.utc)
        millis = int(instant.timestamp() * 1000)

        with patch('apps.tokens.services.slots.timezone.now', return_value=instant):
            first = book_token(shop_id=shop.id, user=cardholder)
            second = book_token(shop_id=shop.id, user=other)

        assert first.id != second.id
        assert first.id.startswith(f'T{millis}')
        assert second.id.startswith(f'T{millis}')
        assert (first.queue_position, second.queue_position) == (1, 2)
        assert Token.objects.filter(shop=shop).count() == 2

    def test_shop_is_required(self, cardholder):
        with pytest.raises(ShopRequiredError):
            book_token(shop_id=None, user=cardholder)

    def test_next_queue_position(self, shop):
        day = date(2025, 3, 10)

        assert next_queue_position(shop_id=shop.id, on_date=day) == 1
        assert next_queue_position(shop_id=shop.id, on_date=day) == 2


@pytest.mark.django_db
class TestTokenQueries:

    def test_my_token_is_latest_for_today(self, shop, cardholder):
        book_token(shop_id=shop.id, user=cardholder)
        latest = book_token(shop_id=shop.id, user=cardholder)

        assert get_my_token(user=cardholder).id == latest.id

    def test_my_token_none(self, cardholder):
        assert get_my_token(user=cardholder) is None

    def test_list_shop_tokens_scoped_and_limited(self, shop, other_shop, cardholder):
        for _ in range(3):
            book_token(shop_id=shop.id, user=cardholder)
        book_token(shop_id=other_shop.id, user=cardholder)

        tokens = list(list_shop_tokens(shop_id=shop.id, limit=2))

        assert len(tokens) == 2
        assert all(t.shop_id == shop.id for t in tokens)


@pytest.mark.django_db
class TestUpdateTokenStatus:

    def test_update(self, shop, cardholder):
        token = book_token(shop_id=shop.id, user=cardholder)

        updated = update_token_status(token_id=token.id, status=TokenStatus.COMPLETED)

        assert updated.status == TokenStatus.COMPLETED

    def test_invalid_status(self, shop, cardholder):
        token = book_token(shop_id=shop.id, user=cardholder)

        with pytest.raises(InvalidTokenStatusError):
            update_token_status(token_id=token.id, status='teleported')

    def test_unknown_token(self, db):
        with pytest.raises(TokenNotFoundError):
            update_token_status(token_id='TMISSING', status=TokenStatus.CANCELLED)

    def test_shopkeeper_of_other_shop_is_refused(self, shop, cardholder, other_shopkeeper):
        token = book_token(shop_id=shop.id, user=cardholder)

        with pytest.raises(TokenAccessError):
            update_token_status(
                token_id=token.id, status=TokenStatus.COMPLETED, actor=other_shopkeeper
            )

        token.refresh_from_db()
        assert token.status == TokenStatus.ACTIVE

    def test_own_shopkeeper_and_admin_allowed(self, shop, cardholder, shopkeeper, admin_user):
        token = book_token(shop_id=shop.id, user=cardholder)

        update_token_status(token_id=token.id, status=TokenStatus.COMPLETED, actor=shopkeeper)
        updated = update_token_status(token_id=token.id, status=TokenStatus.CANCELLED, actor=admin_user)

        assert updated.status == TokenStatus.CANCELLED


# =============================================================================
# Broadcast
# =============================================================================

@pytest.fixture
def phh_households(shop, other_shop, cardholder):
    """Three active PHH cardholders at SHOP001 plus some that must be skipped."""
    second = make_cardholder(shop, 'phh2@example.com')
    third = make_cardholder(shop, 'phh3@example.com')
    make_cardholder(shop, 'inactive@example.com', is_active=False)
    make_cardholder(shop, 'bpl@example.com', card_type=CardType.BPL)
    make_cardholder(other_shop, 'elsewhere@example.com')
    return [cardholder, second, third]


@pytest.mark.django_db
class TestBroadcast:

    def test_slots_and_notifications(self, shop, phh_households):
        result = broadcast_by_card_type(
            shop_id=shop.id,
            card_type=CardType.PHH,
            start_at=local(2025, 3, 10, 10, 7),
        )

        assert result.created == 3
        assert result.recipients == 3
        assert result.start_at == local(2025, 3, 10, 10, 15)
        assert [s.user_id for s in result.slots] == [u.id for u in phh_households]
        assert [s.time_slot for s in result.slots] == ['10:15 AM', '10:30 AM', '10:45 AM']
        assert [s.queue_position for s in result.slots] == [1, 2, 3]
        assert {s.date for s in result.slots} == {'2025-03-10'}

        tokens = Token.objects.filter(shop=shop).order_by('queue_position')
        assert [t.status for t in tokens] == [TokenStatus.PENDING] * 3

        notifications = Notification.objects.filter(shop=shop, type='token')
        assert notifications.count() == 3
        assert {n.user_id for n in notifications} == {u.id for u in phh_households}
        first = notifications.get(user=phh_households[0])
        assert first.message == (
            'Dear PHH cardholder, your token has been created for 2025-03-10 '
            'at 10:15 AM. Please visit the shop at your assigned 15-minute slot.'
        )

    def test_token_ids_share_timestamp_with_index_suffix(self, shop, phh_households):
        result = broadcast_by_card_type(shop_id=shop.id, card_type=CardType.PHH)

        prefixes = {s.token_id[:-4] for s in result.slots}
        assert len(prefixes) == 1
        assert [s.token_id[-4:] for s in result.slots] == ['0000', '0001', '0002']

    def test_custom_interval(self, shop, phh_households):
        result = broadcast_by_card_type(
            shop_id=shop.id,
            card_type=CardType.PHH,
            interval_minutes=30,
            start_at=local(2025, 3, 10, 9, 0),
        )

        assert [s.time_slot for s in result.slots] == ['9:00 AM', '9:30 AM', '10:00 AM']

    def test_positions_restart_after_midnight(self, shop, phh_households):
        make_cardholder(shop, 'phh4@example.com')

        result = broadcast_by_card_type(
            shop_id=shop.id,
            card_type=CardType.PHH,
            start_at=local(2025, 3, 10, 23, 30),
        )

        assert [(s.date, s.time_slot, s.queue_position) for s in result.slots] == [
            ('2025-03-10', '11:30 PM', 1),
            ('2025-03-10', '11:45 PM', 2),
            ('2025-03-11', '12:00 AM', 1),
            ('2025-03-11', '12:15 AM', 2),
        ]

    def test_positions_continue_after_booked_tokens(self, shop, phh_households):
        day = date(2025, 3, 10)
        book_token(shop_id=shop.id, user=phh_households[0], token_date=day)

        result = broadcast_by_card_type(
            shop_id=shop.id,
            card_type=CardType.PHH,
            start_at=local(2025, 3, 10, 10, 0),
        )

        assert [s.queue_position for s in result.slots] == [2, 3, 4]

    def test_collision_skips_recipient(self, shop, phh_households):
        ids = iter(['TDUP', 'TDUP', 'TLAST'])
        with patch(
            'apps.tokens.services.broadcast.generate_token_id',
            side_effect=lambda *args, **kwargs: next(ids),
        ):
            result = broadcast_by_card_type(
                shop_id=shop.id,
                card_type=CardType.PHH,
                start_at=local(2025, 3, 10, 10, 0),
            )

        assert result.recipients == 3
        assert result.created == 2
        assert [s.user_id for s in result.slots] == [phh_households[0].id, phh_households[2].id]
        assert [s.queue_position for s in result.slots] == [1, 2]
        assert Notification.objects.filter(type='token').count() == 2
        assert not Notification.objects.filter(user=phh_households[1]).exists()

    def test_no_recipients(self, shop):
        result = broadcast_by_card_type(shop_id=shop.id, card_type=CardType.AAY)

        assert result.created == 0
        assert result.slots == []
        assert Notification.objects.count() == 0

    def test_shop_is_required(self, db):
        with pytest.raises(ShopRequiredError):
            broadcast_by_card_type(shop_id=None, card_type=CardType.PHH)

    @pytest.mark.parametrize('card_type, interval', [
        ('XYZ', 15),
        (None, 15),
        (CardType.PHH, 0),
        (CardType.PHH, -15),
    ])
    def test_invalid_input(self, shop, card_type, interval):
        with pytest.raises(InvalidBroadcastError):
            broadcast_by_card_type(shop_id=shop.id, card_type=card_type, interval_minutes=interval)
