import pytest
from unittest.mock import patch


@pytest.fixture
def known_code():
    """Make every generated login code 123456."""
    with patch('apps.accounts.services.otp_login.generate_code', return_value='123456'):
        yield '123456'
