from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from marketplace_auth.domain.entities import UserSession


class ISessionRepository(ABC):
    """Session store interface - application layer"""

    @abstractmethod
    async def create(self, user_id: UUID, expires_at: datetime) -> str:
        """Persist a new session and return its opaque session token"""
        pass

    @abstractmethod
    async def find_by_token(self, session_token: str) -> Optional[UserSession]:
        """
        Find a session by its opaque token.

        Expired rows are returned as-is; callers treat them exactly like a
        missing row.
        """
        pass

    @abstractmethod
    async def delete_by_token(self, session_token: str) -> int:
        """Delete one session. Returns 0 when the token is unknown."""
        pass

    @abstractmethod
    async def delete_all_for_user(self, user_id: UUID) -> int:
        """Delete every session owned by a user in a single statement"""
        pass

    @abstractmethod
    async def count_active_for_user(self, user_id: UUID, now: datetime) -> int:
        """Count sessions of a user that are still valid at `now`"""
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """Delete every session whose expiry is at or before `now`"""
        pass

    @abstractmethod
    async def rotate(self, session_token: str, expires_at: datetime) -> Optional[str]:
        """
        Replace a session token with a fresh one for the same user.

        Returns None when the old token no longer exists.
        """
        pass
