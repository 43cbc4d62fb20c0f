"""
Confirm Password Reset Use Case

Redeems a password reset token and revokes every session of the user.
"""

import logging

from fastapi.concurrency import run_in_threadpool

from marketplace_auth.app.services.auth_services import AuthServices
from marketplace_auth.app.services.unit_of_work import UnitOfWork
from marketplace_auth.app.use_cases.failures import auth_failure, infrastructure_failure
from marketplace_auth.domain.entities import TokenPurpose
from marketplace_auth.domain.errors import (
    AuthError,
    InfrastructureError,
    InvalidCredentialsError,
    TokenConsumedError,
    TokenExpiredError,
)
from marketplace_auth.libs.result import Result, Return
from .dtos import StatusResponse
from .password_policy import validate_password

logger = logging.getLogger(__name__)


class ConfirmPasswordResetUseCase:
    """
    Use case for confirming password reset.

    Business Rules:
    - Token signature and purpose are checked first
    - Token must still be the live reset token of its user
      (consumed or superseded tokens fail with TOKEN_CONSUMED)
    - Token must not be expired (signed expiry and stored expiry)
    - New password hash and token clearing happen in one UPDATE
    - All user sessions are revoked in the same transaction
    """

    def __init__(self, uow: UnitOfWork, auth: AuthServices):
        self.uow = uow
        self.auth = auth

    async def execute(self, token: str, new_password: str) -> Result[StatusResponse]:
        """
        Execute confirm password reset use case.

        Args:
            token: Password reset token (plain text from email)
            new_password: New password to set

        Returns:
            Result with confirmation status, or Error

        Errors:
            - INVALID_PASSWORD: Password does not meet complexity requirements
            - INVALID_CREDENTIALS: Token malformed, forged or user unknown
            - TOKEN_CONSUMED: Token already used or superseded
            - TOKEN_EXPIRED: Token has expired
        """
        password_check = validate_password(new_password)
        if password_check.is_err():
            return password_check

        try:
            return await self._confirm(token, new_password)
        except AuthError as exc:
            return auth_failure("confirm-password-reset", exc)
        except InfrastructureError as exc:
            return infrastructure_failure("confirm-password-reset", exc)

    async def _confirm(self, token: str, new_password: str) -> Result[StatusResponse]:
        user_id = self.auth.tokens.read_single_use_token(token, TokenPurpose.password_reset)
        token_hash = self.auth.tokens.digest_single_use_token(token)

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                raise InvalidCredentialsError(f"reset token subject {user_id} not found")

            if user.reset_token_hash != token_hash:
                raise TokenConsumedError(f"reset token for user {user_id} is no longer live")

            now = self.auth.clock.now()
            if user.reset_token_expires_at is None or now >= user.reset_token_expires_at:
                raise TokenExpiredError(f"reset token for user {user_id} expired")

            password_hash = await run_in_threadpool(self.auth.passwords.hash, new_password)
            updated = await self.uow.users.consume_reset_token(
                user_id, token_hash, password_hash, now
            )
            if updated == 0:
                raise TokenConsumedError(f"reset token for user {user_id} consumed concurrently")

            revoked_count = await self.uow.sessions.delete_all_for_user(user_id)

            await self.uow.commit()

        logger.info(f"Password reset for user {user_id}; revoked {revoked_count} session(s)")

        return Return.ok(
            StatusResponse(status="success", message="Password has been reset successfully")
        )
