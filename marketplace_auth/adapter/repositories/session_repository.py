import logging
import secrets
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from marketplace_auth.app.repositories.session_repository import ISessionRepository
from marketplace_auth.app.services.token_codec import keyed_digest
from marketplace_auth.domain.entities import UserSession
from marketplace_auth.domain.errors import ConfigurationError, InfrastructureError

logger = logging.getLogger(__name__)

SESSION_TOKEN_BYTES = 32
MAX_CREATE_ATTEMPTS = 3


class SessionRepository(ISessionRepository):
    """
    Session store implementation using SQLModel.

    Only keyed digests of session tokens are persisted; lookups digest the
    presented token with the same key and hit the unique token_hash index.
    """

    def __init__(self, session: AsyncSession, token_key: str):
        if not token_key:
            raise ConfigurationError(["SESSION_TOKEN_SECRET"])
        self.session = session
        self._token_key = token_key

    def _digest(self, session_token: str) -> str:
        return keyed_digest(self._token_key, session_token)

    async def create(self, user_id: UUID, expires_at: datetime) -> str:
        """Create a new session, regenerating the token on a digest collision"""
        for attempt in range(1, MAX_CREATE_ATTEMPTS + 1):
            session_token = secrets.token_urlsafe(SESSION_TOKEN_BYTES)
            session_obj = UserSession(
                user_id=user_id,
                token_hash=self._digest(session_token),
                expires_at=expires_at,
            )
            try:
                async with self.session.begin_nested():
                    self.session.add(session_obj)
            except IntegrityError:
                logger.warning(
                    f"Session token collision for user {user_id} (attempt {attempt}), regenerating"
                )
                continue
            return session_token

        raise InfrastructureError("could not allocate a unique session token")

    async def find_by_token(self, session_token: str) -> Optional[UserSession]:
        """Find session by its opaque token"""
        stmt = select(UserSession).where(UserSession.token_hash == self._digest(session_token))
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def delete_by_token(self, session_token: str) -> int:
        """Delete a single session by token"""
        stmt = delete(UserSession).where(UserSession.token_hash == self._digest(session_token))
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def delete_all_for_user(self, user_id: UUID) -> int:
        """Delete every session owned by the user"""
        stmt = delete(UserSession).where(UserSession.user_id == user_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def count_active_for_user(self, user_id: UUID, now: datetime) -> int:
        """Count sessions still valid at `now`"""
        stmt = select(func.count()).select_from(UserSession).where(
            UserSession.user_id == user_id, UserSession.expires_at > now
        )
        result = await self.session.exec(stmt)
        return result.one()

    async def delete_expired(self, now: datetime) -> int:
        """Delete sessions whose expiry is at or before `now`"""
        stmt = delete(UserSession).where(UserSession.expires_at <= now)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def rotate(self, session_token: str, expires_at: datetime) -> Optional[str]:
        """Swap a session token for a fresh one, keeping the owner"""
        session_obj = await self.find_by_token(session_token)
        if session_obj is None:
            return None
        deleted = await self.delete_by_token(session_token)
        if deleted == 0:
            # Lost a race with logout / logout-all
            return None
        return await self.create(session_obj.user_id, expires_at)
