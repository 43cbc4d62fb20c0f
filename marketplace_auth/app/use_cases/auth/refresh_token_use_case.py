"""
Refresh Token Use Case

Exchanges a live session token for a new access token.
"""

import logging

from marketplace_auth.app.services.auth_services import AuthServices
from marketplace_auth.app.services.unit_of_work import UnitOfWork
from marketplace_auth.app.use_cases.failures import auth_failure, infrastructure_failure
from marketplace_auth.domain.errors import (
    AuthError,
    InfrastructureError,
    InvalidCredentialsError,
)
from marketplace_auth.libs.result import Result, Return
from .dtos import RefreshTokenResponse

logger = logging.getLogger(__name__)


class RefreshTokenUseCase:
    """
    Use case for refreshing access tokens.

    Business Rules:
    - Session must exist and now < expires_at; an expired row is treated
      exactly like a missing one
    - Owner must still exist and be active
    - The session token is reused until expiry or logout, unless
      rotate_session_tokens is enabled (then it is swapped, keeping the
      original absolute expiry)
    """

    def __init__(self, uow: UnitOfWork, auth: AuthServices):
        self.uow = uow
        self.auth = auth

    async def execute(self, session_token: str) -> Result[RefreshTokenResponse]:
        """
        Execute refresh token use case.

        Args:
            session_token: Opaque session token returned at login

        Returns:
            Result with RefreshTokenResponse containing a new access token, or Error
        """
        try:
            return await self._refresh(session_token)
        except AuthError as exc:
            return auth_failure("refresh", exc)
        except InfrastructureError as exc:
            return infrastructure_failure("refresh", exc)

    async def _refresh(self, session_token: str) -> Result[RefreshTokenResponse]:
        async with self.uow:
            session = await self.uow.sessions.find_by_token(session_token)
            now = self.auth.clock.now()

            if session is None or session.is_expired(now):
                raise InvalidCredentialsError("unknown or expired session")

            user = await self.uow.users.get_by_id(session.user_id)
            if user is None or not user.is_active:
                raise InvalidCredentialsError(f"session owner {session.user_id} unavailable")
            user_id = user.id

            rotated_token = None
            if self.auth.settings.rotate_session_tokens:
                rotated_token = await self.uow.sessions.rotate(
                    session_token, session.expires_at
                )
                if rotated_token is None:
                    raise InvalidCredentialsError("session revoked during rotation")
                await self.uow.commit()

        access = self.auth.tokens.mint_access_token(user_id)
        logger.debug(f"Access token refreshed for user {user_id}")

        return Return.ok(
            RefreshTokenResponse(
                access_token=access.token,
                expires_at=access.expires_at,
                session_token=rotated_token,
            )
        )
