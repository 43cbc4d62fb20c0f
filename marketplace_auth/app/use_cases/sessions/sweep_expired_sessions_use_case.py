"""
Sweep Expired Sessions Use Case

Bulk deletion of session records whose expiry has passed.
"""

import logging

from pydantic import BaseModel

from marketplace_auth.app.services.auth_services import AuthServices
from marketplace_auth.app.services.unit_of_work import UnitOfWork
from marketplace_auth.app.use_cases.failures import infrastructure_failure
from marketplace_auth.domain.errors import InfrastructureError
from marketplace_auth.libs.result import Result, Return

logger = logging.getLogger(__name__)


class SweepResponse(BaseModel):
    deleted_count: int


class SweepExpiredSessionsUseCase:
    """
    Use case for removing expired sessions.

    Expired rows are already rejected on lookup; the sweep only bounds
    table growth. Rows with expires_at <= now are deleted in one statement.
    """

    def __init__(self, uow: UnitOfWork, auth: AuthServices):
        self.uow = uow
        self.auth = auth

    async def execute(self) -> Result[SweepResponse]:
        try:
            async with self.uow:
                deleted = await self.uow.sessions.delete_expired(self.auth.clock.now())
                await self.uow.commit()
        except InfrastructureError as exc:
            return infrastructure_failure("sweep-sessions", exc)

        if deleted:
            logger.info(f"Swept {deleted} expired session(s)")
        return Return.ok(SweepResponse(deleted_count=deleted))
