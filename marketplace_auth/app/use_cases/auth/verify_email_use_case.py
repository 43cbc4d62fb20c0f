"""
Verify Email Use Case

Redeems an email verification token.
"""

import logging

from marketplace_auth.app.services.auth_services import AuthServices
from marketplace_auth.app.services.unit_of_work import UnitOfWork
from marketplace_auth.app.use_cases.failures import auth_failure, infrastructure_failure
from marketplace_auth.domain.entities import TokenPurpose
from marketplace_auth.domain.errors import (
    AuthError,
    InfrastructureError,
    InvalidCredentialsError,
    TokenConsumedError,
)
from marketplace_auth.libs.result import Result, Return
from .dtos import StatusResponse

logger = logging.getLogger(__name__)


class VerifyEmailUseCase:
    """
    Use case for email verification.

    Business Rules:
    - Token must be the live verification token of its user
    - Verification tokens do not expire
    - Sets email_verified and clears the token in one UPDATE
    - A consumed or superseded token fails with TOKEN_CONSUMED
    """

    def __init__(self, uow: UnitOfWork, auth: AuthServices):
        self.uow = uow
        self.auth = auth

    async def execute(self, token: str) -> Result[StatusResponse]:
        """
        Execute email verification use case.

        Args:
            token: Verification token from email link

        Returns:
            Result with verification status, or Error
        """
        try:
            return await self._verify(token)
        except AuthError as exc:
            return auth_failure("verify-email", exc)
        except InfrastructureError as exc:
            return infrastructure_failure("verify-email", exc)

    async def _verify(self, token: str) -> Result[StatusResponse]:
        user_id = self.auth.tokens.read_single_use_token(token, TokenPurpose.email_verification)
        token_hash = self.auth.tokens.digest_single_use_token(token)

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                raise InvalidCredentialsError(f"verification token subject {user_id} not found")

            if user.verification_token_hash != token_hash:
                raise TokenConsumedError(
                    f"verification token for user {user_id} is no longer live"
                )

            updated = await self.uow.users.consume_verification_token(user_id, token_hash)
            if updated == 0:
                raise TokenConsumedError(
                    f"verification token for user {user_id} consumed concurrently"
                )

            await self.uow.commit()

        logger.info(f"Email verified for user {user_id}")

        return Return.ok(StatusResponse(status="verified", message="Email successfully verified"))
