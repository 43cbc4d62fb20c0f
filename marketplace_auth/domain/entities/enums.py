"""
Auth Domain Enums
"""

from enum import Enum


class UserStatus(str, Enum):
    """User account status"""

    active = "active"
    disabled = "disabled"


class TokenPurpose(str, Enum):
    """What a single-use token may be redeemed for"""

    password_reset = "password_reset"
    email_verification = "email_verification"
