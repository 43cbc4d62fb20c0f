import asyncio
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from marketplace_auth.adapter.repositories.session_repository import SessionRepository
from marketplace_auth.adapter.repositories.user_repository import UserRepository
from marketplace_auth.app.services.unit_of_work import UnitOfWork
from marketplace_auth.domain.errors import InfrastructureError
from marketplace_auth.domain.settings import AuthSettings

logger = logging.getLogger(__name__)

# Failures that mean "could not verify" rather than "verified and invalid"
INFRASTRUCTURE_FAILURES = (SQLAlchemyError, OSError, asyncio.TimeoutError)


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession, settings: AuthSettings):
        self.session = session
        self.settings = settings

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.sessions = SessionRepository(self.session, self.settings.session_token_secret)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        try:
            await self.rollback()
        except SQLAlchemyError as rollback_exc:
            if exc is None:
                raise InfrastructureError("rollback failed") from rollback_exc
            logger.error(f"Rollback failed after {exc_type.__name__}: {rollback_exc}")

        if isinstance(exc, INFRASTRUCTURE_FAILURES):
            raise InfrastructureError(f"storage failure: {exc_type.__name__}") from exc
        return False

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
