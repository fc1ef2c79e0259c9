"""
One-time passcode login.

A numeric code is emailed to the user and only its hash is stored.
Verifying a code logs the user in, creating a minimal account on the
first login.
"""

import logging
import secrets
from datetime import timedelta
from typing import Tuple

from django.conf import settings
from django.contrib.auth.hashers import make_password, check_password
from django.core.mail import send_mail
from django.db import transaction
from django.db.models import F
from django.utils import timezone
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, Role, VerificationCode
from apps.shops.models import Shop

from .exceptions import (
    CodeDeliveryError,
    InvalidCodeError,
    InactiveAccountError,
    RoleMismatchError,
)

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def generate_code(length: int = None) -> str:
    """Return a random numeric code without a leading zero."""
    length = length or settings.OTP_CODE_LENGTH
    low = 10 ** (length - 1)
    return str(low + secrets.randbelow(9 * low))


def issue_tokens_for_user(user: User) -> dict:
    """JWT pair carrying the user's role and shop as claims."""
    refresh = RefreshToken.for_user(user)
    refresh['role'] = user.role
    refresh['shop_id'] = user.shop_id

    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


def request_login_code(*, email: str, role: str) -> VerificationCode:
    """
    Create a verification code and email it.

    Args:
        email: Address the code is sent to
        role: Role the user intends to log in with (used in the message)

    Returns:
        The stored VerificationCode (hashed)

    Raises:
        CodeDeliveryError: If the email cannot be sent
    """
    email = normalize_email(email)
    code = generate_code()
    expiry_minutes = settings.OTP_EXPIRY_MINUTES

    verification = VerificationCode.objects.create(
        email=email,
        code=make_password(code),
        expires_at=timezone.now() + timedelta(minutes=expiry_minutes),
    )

    try:
        send_mail(
            subject='Your Ration TDS Verification Code',
            message=(
                f"Your {role} login verification code is {code}.\n"
                f"This code expires in {expiry_minutes} minutes."
            ),
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[email],
        )
    except OSError as e:
        logger.exception("Failed to send verification code to %s", email)
        raise CodeDeliveryError("Failed to send verification code") from e

    logger.info("Verification code sent to %s", email)
    return verification


def _find_matching_code(email: str, code: str):
    candidates = (
        VerificationCode.objects
        .filter(email=email, verified_at__isnull=True, expires_at__gt=timezone.now())
        .order_by('-created_at')[:settings.OTP_MAX_ACTIVE_CODES]
    )
    candidates = list(candidates)
    if not candidates:
        raise InvalidCodeError("Invalid or expired code")

    for candidate in candidates:
        if check_password(code, candidate.code):
            return candidate

    VerificationCode.objects.filter(
        email=email, verified_at__isnull=True
    ).update(attempts=F('attempts') + 1)
    logger.warning("Invalid verification code for %s", email)
    raise InvalidCodeError("Invalid code")


def verify_login_code(
    *,
    email: str,
    code: str,
    role: str,
    language: str = 'english'
) -> Tuple[User, dict, bool]:
    """
    Verify a login code and sign the user in.

    Only the newest few unexpired, unused codes are checked. A wrong code
    increments ``attempts`` on every pending code for the address.

    New accounts can only be created for cardholders; they are attached
    to the default shop when it exists.

    Returns:
        (user, JWT token pair, created flag)

    Raises:
        InvalidCodeError: If no pending code matches
        InactiveAccountError: If the account is deactivated
        RoleMismatchError: If the account has a different role, or a
            non-cardholder account does not exist
    """
    email = normalize_email(email)
    verification = _find_matching_code(email, code)

    with transaction.atomic():
        verification.verified_at = timezone.now()
        verification.save(update_fields=['verified_at'])

        user = User.objects.select_for_update().filter(email=email).first()
        created = user is None

        if created:
            if role != Role.CARDHOLDER:
                raise RoleMismatchError(f"No {role} account exists for this email")
            shop_id = settings.DEFAULT_SHOP_ID
            user = User.objects.create_user(
                email=email,
                name=email.split('@')[0],
                role=Role.CARDHOLDER,
                language=language,
                shop=Shop.objects.filter(id=shop_id).first(),
            )
            logger.info("Created user %s on first login", user.id)
        else:
            if not user.is_active:
                raise InactiveAccountError("Account is deactivated")
            if user.role != role:
                raise RoleMismatchError(f"This account is not registered as {role}")

        user.last_login = timezone.now()
        user.language = language
        user.save(update_fields=['last_login', 'language', 'updated_at'])

    return user, issue_tokens_for_user(user), created
