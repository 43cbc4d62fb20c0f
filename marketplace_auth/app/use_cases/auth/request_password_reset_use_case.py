"""
Request Password Reset Use Case

Issues a single-use password reset token.
"""

import logging

from marketplace_auth.app.services.auth_services import AuthServices
from marketplace_auth.app.services.unit_of_work import UnitOfWork
from marketplace_auth.app.use_cases.failures import infrastructure_failure
from marketplace_auth.domain.base import normalize_email
from marketplace_auth.domain.entities import TokenPurpose
from marketplace_auth.domain.errors import InfrastructureError
from marketplace_auth.libs.result import Result, Return
from .dtos import StatusResponse

logger = logging.getLogger(__name__)

RESET_REQUESTED_MESSAGE = "If the email exists, a password reset link has been sent"


class RequestPasswordResetUseCase:
    """
    Use case for requesting password reset.

    Business Rules:
    - No email enumeration (same response for valid/invalid emails)
    - Token is signed and expires after PASSWORD_RESET_TTL
    - Only its keyed digest is stored, overwriting any previous reset token
      (the previous token becomes permanently unusable)
    - Raw token is handed to the delivery collaborator after commit
    """

    def __init__(self, uow: UnitOfWork, auth: AuthServices):
        self.uow = uow
        self.auth = auth

    async def execute(self, email: str) -> Result[StatusResponse]:
        """
        Execute request password reset use case.

        Args:
            email: User's email address

        Returns:
            Result with a success-shaped StatusResponse, or Error on
            infrastructure failure
        """
        email = normalize_email(email)
        try:
            async with self.uow:
                user = await self.uow.users.get_by_email(email)

                if user is None:
                    logger.debug("Password reset requested for unknown email")
                    return Return.ok(StatusResponse(status="sent", message=RESET_REQUESTED_MESSAGE))

                user_id, user_email = user.id, user.email
                reset = self.auth.tokens.mint_single_use_token(
                    user_id, TokenPurpose.password_reset
                )
                await self.uow.users.set_reset_token(user_id, reset.digest, reset.expires_at)
                await self.uow.commit()
        except InfrastructureError as exc:
            return infrastructure_failure("request-password-reset", exc)

        await self.auth.delivery.send_password_reset(user_email, reset.token)
        logger.info(f"Password reset token issued for user {user_id}")

        return Return.ok(StatusResponse(status="sent", message=RESET_REQUESTED_MESSAGE))
