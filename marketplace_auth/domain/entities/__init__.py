"""
Auth Domain Entities
"""

from .enums import TokenPurpose, UserStatus
from .session import UserSession
from .user import User

__all__ = [
    # Enums
    "TokenPurpose",
    "UserStatus",
    # Entities
    "User",
    "UserSession",
]
