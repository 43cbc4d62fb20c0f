from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from marketplace_auth.domain.entities import User


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by (normalized) email address"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user. Raises EmailAlreadyExistsError on a duplicate email."""
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update existing user"""
        pass

    @abstractmethod
    async def set_reset_token(
        self, user_id: UUID, token_hash: str, expires_at: datetime
    ) -> int:
        """Store a reset token digest, superseding any previous one. Returns row count."""
        pass

    @abstractmethod
    async def consume_reset_token(
        self, user_id: UUID, token_hash: str, password_hash: str, now: datetime
    ) -> int:
        """
        Apply a new password and clear the reset token in one statement.

        Only matches while the stored digest still equals token_hash; returns
        0 when the token was consumed or superseded concurrently.
        """
        pass

    @abstractmethod
    async def set_verification_token(self, user_id: UUID, token_hash: str) -> int:
        """Store a verification token digest, superseding any previous one"""
        pass

    @abstractmethod
    async def consume_verification_token(self, user_id: UUID, token_hash: str) -> int:
        """Mark email verified and clear the token in one statement. Returns row count."""
        pass

    @abstractmethod
    async def update_password(
        self, user_id: UUID, password_hash: str, now: datetime
    ) -> int:
        """Set a new password hash, clearing any outstanding reset token"""
        pass
