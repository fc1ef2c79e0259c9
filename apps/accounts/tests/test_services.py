"""
Service layer tests for accounts app.

Tests cover:
- OTP code issue and verification
- First-login account creation and role checks
- Admin user management
"""

import pytest
from datetime import timedelta
from unittest.mock import patch

from django.contrib.auth.hashers import check_password
from django.core import mail
from django.test import override_settings
from django.utils import timezone
from rest_framework_simplejwt.tokens import AccessToken

from apps.accounts.models import User, Role, CardType, VerificationCode
from apps.accounts.services import (
    generate_code,
    request_login_code,
    verify_login_code,
    list_users,
    update_user_profile,
    set_user_flag,
    set_user_active,
    get_user_stats_by_shop,
)
from apps.accounts.services.exceptions import (
    CodeDeliveryError,
    InvalidCodeError,
    InactiveAccountError,
    RoleMismatchError,
    UserNotFoundError,
    UserUpdateError,
)


# =============================================================================
# OTP login
# =============================================================================

class TestGenerateCode:

    def test_numeric_with_configured_length(self):
        for _ in range(50):
            code = generate_code()
            assert len(code) == 6
            assert code.isdigit()
            assert code[0] != '0'


@pytest.mark.django_db
class TestRequestLoginCode:

    def test_stores_hash_and_sends_email(self, known_code):
        verification = request_login_code(email='  New@Example.com ', role=Role.CARDHOLDER)

        assert verification.email == 'new@example.com'
        assert verification.code != known_code
        assert check_password(known_code, verification.code)
        assert verification.expires_at > timezone.now()

        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == ['new@example.com']
        assert known_code in mail.outbox[0].body

    def test_delivery_failure(self, db):
        with patch(
            'apps.accounts.services.otp_login.send_mail',
            side_effect=OSError('connection refused'),
        ):
            with pytest.raises(CodeDeliveryError):
                request_login_code(email='x@example.com', role=Role.CARDHOLDER)


@pytest.mark.django_db
class TestVerifyLoginCode:

    def test_first_login_creates_cardholder(self, shop, known_code):
        request_login_code(email='new@example.com', role=Role.CARDHOLDER)

        user, tokens, created = verify_login_code(
            email='new@example.com', code=known_code, role=Role.CARDHOLDER, language='hindi'
        )

        assert created is True
        assert user.role == Role.CARDHOLDER
        assert user.name == 'new'
        assert user.language == 'hindi'
        assert user.shop_id == 'SHOP001'
        assert user.last_login is not None
        assert VerificationCode.objects.get().verified_at is not None

        access = AccessToken(tokens['access'])
        assert access['role'] == 'cardholder'
        assert access['shop_id'] == 'SHOP001'
        assert str(access['user_id']) == str(user.id)

    def test_existing_user_logs_in(self, shopkeeper, known_code):
        request_login_code(email=shopkeeper.email, role=Role.SHOPKEEPER)

        user, _, created = verify_login_code(
            email=shopkeeper.email, code=known_code, role=Role.SHOPKEEPER
        )

        assert created is False
        assert user.id == shopkeeper.id

    def test_code_is_single_use(self, cardholder, known_code):
        request_login_code(email=cardholder.email, role=Role.CARDHOLDER)
        verify_login_code(email=cardholder.email, code=known_code, role=Role.CARDHOLDER)

        with pytest.raises(InvalidCodeError, match='Invalid or expired code'):
            verify_login_code(email=cardholder.email, code=known_code, role=Role.CARDHOLDER)

    def test_wrong_code_increments_attempts(self, cardholder, known_code):
        request_login_code(email=cardholder.email, role=Role.CARDHOLDER)

        with pytest.raises(InvalidCodeError, match='Invalid code'):
            verify_login_code(email=cardholder.email, code='654321', role=Role.CARDHOLDER)

        assert VerificationCode.objects.get().attempts == 1

    def test_expired_code(self, cardholder, known_code):
        request_login_code(email=cardholder.email, role=Role.CARDHOLDER)
        VerificationCode.objects.update(expires_at=timezone.now() - timedelta(minutes=1))

        with pytest.raises(InvalidCodeError, match='Invalid or expired code'):
            verify_login_code(email=cardholder.email, code=known_code, role=Role.CARDHOLDER)

    def test_only_newest_codes_are_checked(self, cardholder):
        with patch('apps.accounts.services.otp_login.generate_code', return_value='111111'):
            request_login_code(email=cardholder.email, role=Role.CARDHOLDER)
        VerificationCode.objects.update(created_at=timezone.now() - timedelta(minutes=5))
        with patch('apps.accounts.services.otp_login.generate_code', return_value='222222'):
            request_login_code(email=cardholder.email, role=Role.CARDHOLDER)
            request_login_code(email=cardholder.email, role=Role.CARDHOLDER)

        with override_settings(OTP_MAX_ACTIVE_CODES=2):
            with pytest.raises(InvalidCodeError):
                verify_login_code(email=cardholder.email, code='111111', role=Role.CARDHOLDER)

    def test_inactive_account(self, cardholder, known_code):
        cardholder.is_active = False
        cardholder.save()
        request_login_code(email=cardholder.email, role=Role.CARDHOLDER)

        with pytest.raises(InactiveAccountError):
            verify_login_code(email=cardholder.email, code=known_code, role=Role.CARDHOLDER)

    def test_unknown_shopkeeper_is_not_created(self, db, known_code):
        request_login_code(email='who@example.com', role=Role.SHOPKEEPER)

        with pytest.raises(RoleMismatchError):
            verify_login_code(email='who@example.com', code=known_code, role=Role.SHOPKEEPER)

        assert not User.objects.filter(email='who@example.com').exists()

    def test_role_must_match_account(self, cardholder, known_code):
        request_login_code(email=cardholder.email, role=Role.ADMIN)

        with pytest.raises(RoleMismatchError):
            verify_login_code(email=cardholder.email, code=known_code, role=Role.ADMIN)


# =============================================================================
# User administration
# =============================================================================

@pytest.fixture
def population(shop, other_shop, admin_user, shopkeeper, other_shopkeeper, cardholder):
    flagged = User.objects.create_user(
        email='flagged@example.com', name='Zed', role=Role.CARDHOLDER, shop=shop,
        card_type=CardType.BPL, is_flagged=True,
    )
    return {
        'admin': admin_user,
        'shopkeeper': shopkeeper,
        'other_shopkeeper': other_shopkeeper,
        'cardholder': cardholder,
        'flagged': flagged,
    }


@pytest.mark.django_db
class TestListUsers:

    def test_ordering(self, population):
        emails = [u.email for u in list_users()]

        assert emails == [
            'admin@example.com',
            'shopkeeper@example.com',
            'shopkeeper2@example.com',
            'flagged@example.com',
            'cardholder@example.com',
        ]

    def test_filters(self, population):
        assert {u.email for u in list_users(role=Role.SHOPKEEPER)} == {
            'shopkeeper@example.com', 'shopkeeper2@example.com'
        }
        assert {u.email for u in list_users(shop_id='SHOP002')} == {'shopkeeper2@example.com'}
        assert [u.email for u in list_users(flagged=True)] == ['flagged@example.com']
        assert len(list_users(flagged=False)) == 4


@pytest.mark.django_db
class TestUserUpdates:

    def test_update_profile(self, cardholder):
        user = update_user_profile(user_id=cardholder.id, family_size=6, district='Agra')

        assert user.family_size == 6
        assert user.district == 'Agra'

    def test_non_editable_field(self, cardholder):
        with pytest.raises(UserUpdateError):
            update_user_profile(user_id=cardholder.id, is_staff=True)

    def test_unknown_user(self, db):
        with pytest.raises(UserNotFoundError):
            update_user_profile(user_id=404404, name='Ghost')

    def test_flag_and_unflag(self, cardholder, admin_user):
        flagged = set_user_flag(
            user_id=cardholder.id, is_flagged=True, flagged_by=admin_user, reason='Duplicate card'
        )
        assert flagged.is_flagged is True
        assert flagged.flag_reason == 'Duplicate card'
        assert flagged.flagged_by == admin_user

        unflagged = set_user_flag(user_id=cardholder.id, is_flagged=False, flagged_by=admin_user)
        assert unflagged.is_flagged is False
        assert unflagged.flag_reason is None
        assert unflagged.flagged_at is None

    def test_default_flag_reason(self, cardholder, admin_user):
        user = set_user_flag(user_id=cardholder.id, is_flagged=True, flagged_by=admin_user)

        assert user.flag_reason == 'Suspicious activity'

    def test_admin_cannot_be_flagged(self, admin_user):
        with pytest.raises(UserUpdateError, match='Cannot flag admin users'):
            set_user_flag(user_id=admin_user.id, is_flagged=True, flagged_by=admin_user)

    def test_deactivate(self, cardholder):
        assert set_user_active(user_id=cardholder.id, is_active=False).is_active is False


@pytest.mark.django_db
class TestUserStats:

    def test_counts_per_shop(self, population):
        stats = {row['shop_id']: row for row in get_user_stats_by_shop()}

        assert stats['SHOP001']['shopkeepers'] == 1
        assert stats['SHOP001']['cardholders'] == 2
        assert stats['SHOP001']['flagged_users'] == 1
        assert stats['SHOP002']['cardholders'] == 0
        assert None not in stats
