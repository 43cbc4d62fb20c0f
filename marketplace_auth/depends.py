from typing import Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from marketplace_auth.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from marketplace_auth.app.services.auth_services import AuthServices

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

# The request gate produces the 401 itself, so the bearer scheme is only
# declared here for the OpenAPI schema
security = HTTPBearer(auto_error=False)


async def get_unit_of_work(request: Request):
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session, request.app.state.auth_settings)


def get_auth_services(request: Request) -> AuthServices:
    return request.app.state.auth


async def get_current_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> UUID:
    """
    Dependency that verifies the bearer access token.

    Returns:
        Principal id from the token's subject

    Raises:
        ClientError: 401 if the token is missing, invalid or expired
    """
    return request.app.state.request_gate.verify(request)


async def get_optional_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[UUID]:
    """Principal id when a valid token is presented, None otherwise."""
    return request.app.state.request_gate.authenticate(request)
