from uuid import UUID

from marketplace_auth.app.services.auth_services import AuthServices
from marketplace_auth.app.services.unit_of_work import UnitOfWork
from marketplace_auth.app.use_cases.failures import infrastructure_failure
from marketplace_auth.domain.errors import InfrastructureError
from marketplace_auth.libs.result import Error, Result, Return
from .dtos import CurrentUserResponse


class GetCurrentUserUseCase:
    """Profile of the authenticated user plus the number of live sessions"""

    def __init__(self, uow: UnitOfWork, auth: AuthServices):
        self.uow = uow
        self.auth = auth

    async def execute(self, user_id: UUID) -> Result[CurrentUserResponse]:
        try:
            async with self.uow:
                user = await self.uow.users.get_by_id(user_id)
                if user is None:
                    return Return.err(Error("USER_NOT_FOUND", "User not found"))

                active_sessions = await self.uow.sessions.count_active_for_user(
                    user_id, self.auth.clock.now()
                )

                # Built inside the block: leaving it rolls back and expires the row
                profile = CurrentUserResponse(
                    id=str(user.id),
                    email=user.email,
                    email_verified=user.email_verified,
                    status=user.status.value,
                    created_at=user.created_at,
                    active_sessions=active_sessions,
                )
        except InfrastructureError as exc:
            return infrastructure_failure("me", exc)

        return Return.ok(profile)
