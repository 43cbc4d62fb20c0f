"""
Logout Use Cases

Single-device logout and logout from every device. Both are idempotent and
always report success.
"""

import logging
from uuid import UUID

from marketplace_auth.app.services.auth_services import AuthServices
from marketplace_auth.app.services.unit_of_work import UnitOfWork
from marketplace_auth.app.use_cases.failures import infrastructure_failure
from marketplace_auth.domain.errors import InfrastructureError
from marketplace_auth.libs.result import Result, Return
from .dtos import LogoutResponse

logger = logging.getLogger(__name__)


class LogoutUseCase:
    """
    Use case for logging out one device.

    Business Rules:
    - Deletes only the session behind the presented token
    - Other sessions of the same user are unaffected
    - Unknown or already deleted tokens are not an error
    """

    def __init__(self, uow: UnitOfWork, auth: AuthServices):
        self.uow = uow
        self.auth = auth

    async def execute(self, session_token: str) -> Result[LogoutResponse]:
        try:
            async with self.uow:
                count = await self.uow.sessions.delete_by_token(session_token)
                await self.uow.commit()
        except InfrastructureError as exc:
            return infrastructure_failure("logout", exc)

        logger.debug(f"Logout removed {count} session(s)")
        return Return.ok(
            LogoutResponse(status="success", message="Logout successful", revoked_count=count)
        )


class LogoutAllUseCase:
    """
    Use case for logging out every device of a user.

    Business Rules:
    - A single delete-by-owner statement, so concurrent refreshes see either
      all sessions or none
    - Also used for administrative revocation
    """

    def __init__(self, uow: UnitOfWork, auth: AuthServices):
        self.uow = uow
        self.auth = auth

    async def execute(self, user_id: UUID) -> Result[LogoutResponse]:
        try:
            async with self.uow:
                count = await self.uow.sessions.delete_all_for_user(user_id)
                await self.uow.commit()
        except InfrastructureError as exc:
            return infrastructure_failure("logout-all", exc)

        logger.info(f"User {user_id} logged out from all devices ({count} session(s))")
        return Return.ok(
            LogoutResponse(
                status="success",
                message="Logged out from all devices successfully",
                revoked_count=count,
            )
        )
