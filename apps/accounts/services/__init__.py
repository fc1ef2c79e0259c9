"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    CodeDeliveryError,
    InvalidCodeError,
    InactiveAccountError,
    RoleMismatchError,
    UserNotFoundError,
    UserUpdateError,
)
from .otp_login import (
    normalize_email,
    generate_code,
    request_login_code,
    verify_login_code,
    issue_tokens_for_user,
)
from .user_admin import (
    list_users,
    get_user,
    update_user_profile,
    set_user_flag,
    set_user_active,
    get_user_stats_by_shop,
)

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'CodeDeliveryError',
    'InvalidCodeError',
    'InactiveAccountError',
    'RoleMismatchError',
    'UserNotFoundError',
    'UserUpdateError',
    # OTP login
    'normalize_email',
    'generate_code',
    'request_login_code',
    'verify_login_code',
    'issue_tokens_for_user',
    # User administration
    'list_users',
    'get_user',
    'update_user_profile',
    'set_user_flag',
    'set_user_active',
    'get_user_stats_by_shop',
]
