"""
Admin API Routes - System Administration Endpoints

Authentication is via Admin API Key, not user access tokens.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from marketplace_auth.api.error import raise_for_error
from marketplace_auth.api.utils.admin_auth import verify_admin_api_key
from marketplace_auth.app.services.auth_services import AuthServices
from marketplace_auth.app.services.unit_of_work import UnitOfWork
from marketplace_auth.app.use_cases.auth import LogoutAllUseCase, LogoutResponse
from marketplace_auth.app.use_cases.sessions import SweepExpiredSessionsUseCase, SweepResponse
from marketplace_auth.depends import get_auth_services, get_unit_of_work

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post(
    "/users/{user_id}/revoke-sessions",
    status_code=status.HTTP_200_OK,
    response_model=LogoutResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def revoke_user_sessions(
    user_id: UUID,
    uow: UnitOfWork = Depends(get_unit_of_work),
    auth: AuthServices = Depends(get_auth_services),
):
    """
    Revoke every session of a user (e.g. compromised account).

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 503 Service Unavailable: storage failure
    """
    result = await LogoutAllUseCase(uow, auth).execute(user_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/sessions/sweep",
    status_code=status.HTTP_200_OK,
    response_model=SweepResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def sweep_sessions(
    uow: UnitOfWork = Depends(get_unit_of_work),
    auth: AuthServices = Depends(get_auth_services),
):
    """
    Delete expired sessions now instead of waiting for the background sweep.

    Requires: X-Admin-API-Key header
    """
    result = await SweepExpiredSessionsUseCase(uow, auth).execute()

    if result.is_err():
        raise_for_error(result.error)

    return result.value
