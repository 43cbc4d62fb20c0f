"""
Change Password Use Case

Authenticated password change; every session of the user is revoked.
"""

import logging
from uuid import UUID

from fastapi.concurrency import run_in_threadpool

from marketplace_auth.app.services.auth_services import AuthServices
from marketplace_auth.app.services.unit_of_work import UnitOfWork
from marketplace_auth.app.use_cases.failures import auth_failure, infrastructure_failure
from marketplace_auth.domain.errors import (
    AuthError,
    InfrastructureError,
    InvalidCredentialsError,
)
from marketplace_auth.libs.result import Result, Return
from .dtos import StatusResponse
from .password_policy import validate_password

logger = logging.getLogger(__name__)


class ChangePasswordUseCase:
    """
    Use case for changing the password of the logged-in user.

    Business Rules:
    - Current password must verify
    - Any outstanding reset token is cleared with the password update
    - All sessions are revoked in the same transaction; the user logs in again
    """

    def __init__(self, uow: UnitOfWork, auth: AuthServices):
        self.uow = uow
        self.auth = auth

    async def execute(
        self, user_id: UUID, current_password: str, new_password: str
    ) -> Result[StatusResponse]:
        password_check = validate_password(new_password)
        if password_check.is_err():
            return password_check

        try:
            return await self._change(user_id, current_password, new_password)
        except AuthError as exc:
            return auth_failure("change-password", exc)
        except InfrastructureError as exc:
            return infrastructure_failure("change-password", exc)

    async def _change(
        self, user_id: UUID, current_password: str, new_password: str
    ) -> Result[StatusResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                await run_in_threadpool(self.auth.passwords.burn, current_password)
                raise InvalidCredentialsError(f"user {user_id} not found")

            matches = await run_in_threadpool(
                self.auth.passwords.verify, current_password, user.password_hash
            )
            if not matches:
                raise InvalidCredentialsError(f"wrong current password for user {user_id}")

            now = self.auth.clock.now()
            password_hash = await run_in_threadpool(self.auth.passwords.hash, new_password)
            await self.uow.users.update_password(user_id, password_hash, now)
            revoked_count = await self.uow.sessions.delete_all_for_user(user_id)

            await self.uow.commit()

        logger.info(f"Password changed for user {user_id}; revoked {revoked_count} session(s)")

        return Return.ok(
            StatusResponse(
                status="success",
                message="Password changed successfully. Please log in again.",
            )
        )
