"""
Login Use Case

Authenticates a user, opens a session and issues an access token.
"""

import logging

from fastapi.concurrency import run_in_threadpool

from marketplace_auth.app.services.auth_services import AuthServices
from marketplace_auth.app.services.unit_of_work import UnitOfWork
from marketplace_auth.app.use_cases.failures import auth_failure, infrastructure_failure
from marketplace_auth.domain.base import normalize_email
from marketplace_auth.domain.errors import (
    AuthError,
    InfrastructureError,
    InvalidCredentialsError,
)
from marketplace_auth.libs.result import Error, Result, Return
from .dtos import LoginResponse

logger = logging.getLogger(__name__)


class LoginUseCase:
    """
    Use case for user login.

    Business Rules:
    - Constant-time password comparison to prevent timing attacks
    - Unknown email, wrong password and disabled account are indistinguishable
    - Each login creates an independent session (multi-device)
    - Optional cap on concurrently active sessions per user
    - Updates user.last_login_at
    """

    def __init__(self, uow: UnitOfWork, auth: AuthServices):
        self.uow = uow
        self.auth = auth

    async def execute(self, email: str, password: str) -> Result[LoginResponse]:
        """
        Execute login use case.

        Args:
            email: User email
            password: Plain text password

        Returns:
            Result with LoginResponse containing access and session tokens, or Error
        """
        try:
            return await self._login(normalize_email(email), password)
        except AuthError as exc:
            return auth_failure("login", exc)
        except InfrastructureError as exc:
            return infrastructure_failure("login", exc)

    async def _login(self, email: str, password: str) -> Result[LoginResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            # Always perform a hash check even if user not found
            if user is None:
                await run_in_threadpool(self.auth.passwords.burn, password)
                raise InvalidCredentialsError("unknown email")

            matches = await run_in_threadpool(
                self.auth.passwords.verify, password, user.password_hash
            )
            if not matches:
                raise InvalidCredentialsError(f"wrong password for user {user.id}")

            if not user.is_active:
                raise InvalidCredentialsError(f"user {user.id} is {user.status.value}")

            user_id = user.id
            now = self.auth.clock.now()
            cap = self.auth.settings.max_active_sessions
            if cap is not None:
                active = await self.uow.sessions.count_active_for_user(user_id, now)
                if active >= cap:
                    logger.warning(f"User {user_id} reached the session cap ({cap})")
                    return Return.err(
                        Error(
                            "SESSION_LIMIT_REACHED",
                            "Too many active sessions. Log out from another device first.",
                        )
                    )

            session_expires_at = now + self.auth.settings.session_ttl
            session_token = await self.uow.sessions.create(user_id, session_expires_at)

            user.last_login_at = now
            await self.uow.users.update(user)

            await self.uow.commit()

        access = self.auth.tokens.mint_access_token(user_id)
        logger.info(f"User {user_id} logged in")

        return Return.ok(
            LoginResponse(
                access_token=access.token,
                expires_at=access.expires_at,
                session_token=session_token,
                session_expires_at=session_expires_at,
            )
        )
