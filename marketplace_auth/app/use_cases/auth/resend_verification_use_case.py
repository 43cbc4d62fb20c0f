"""
Resend Verification Email Use Case

Reissues the email verification token.
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

RESEND_MESSAGE = "If the email exists, a verification link has been sent"


class ResendVerificationUseCase:
    """
    Use case for resending email verification.

    Business Rules:
    - New token replaces old token (the old one becomes unusable)
    - Already verified or unknown emails get the same response, no email sent
    """

    def __init__(self, uow: UnitOfWork, auth: AuthServices):
        self.uow = uow
        self.auth = auth

    async def execute(self, email: str) -> Result[StatusResponse]:
        email = normalize_email(email)
        try:
            async with self.uow:
                user = await self.uow.users.get_by_email(email)

                if user is None or user.email_verified:
                    return Return.ok(StatusResponse(status="sent", message=RESEND_MESSAGE))

                user_id, user_email = user.id, user.email
                verification = self.auth.tokens.mint_single_use_token(
                    user_id, TokenPurpose.email_verification
                )
                await self.uow.users.set_verification_token(user_id, verification.digest)
                await self.uow.commit()
        except InfrastructureError as exc:
            return infrastructure_failure("resend-verification", exc)

        await self.auth.delivery.send_email_verification(user_email, verification.token)
        logger.info(f"Verification token reissued for user {user_id}")

        return Return.ok(StatusResponse(status="sent", message=RESEND_MESSAGE))
