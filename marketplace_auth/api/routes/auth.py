from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from marketplace_auth.api.error import raise_for_error
from marketplace_auth.app.services.auth_services import AuthServices
from marketplace_auth.app.services.unit_of_work import UnitOfWork
from marketplace_auth.app.use_cases.auth import (
    ChangePasswordUseCase,
    ConfirmPasswordResetUseCase,
    CurrentUserResponse,
    GetCurrentUserUseCase,
    LoginResponse,
    LoginUseCase,
    LogoutAllUseCase,
    LogoutResponse,
    LogoutUseCase,
    RefreshTokenResponse,
    RefreshTokenUseCase,
    RequestPasswordResetUseCase,
    ResendVerificationUseCase,
    SignupCommand,
    SignupResponse,
    SignupUseCase,
    StatusResponse,
    VerifyEmailUseCase,
)
from marketplace_auth.depends import get_auth_services, get_current_user_id, get_unit_of_work

router = APIRouter(prefix="/auth", tags=["Authentication"])

INVALID_PASSWORD = {"INVALID_PASSWORD": status.HTTP_400_BAD_REQUEST}


class SignupRequest(BaseModel):
    """
    Signup HTTP request payload

    Validates incoming HTTP request before converting to SignupCommand.
    Password policy is enforced by the use case (INVALID_PASSWORD).
    """

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password (8 to 72 bytes)")


@router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=SignupResponse)
async def signup(
    request: SignupRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    auth: AuthServices = Depends(get_auth_services),
):
    """
    User Signup

    Creates a new account and sends the email verification link.
    Does not log the user in.

    Raises:
        - 400 Bad Request: INVALID_PASSWORD
        - 409 Conflict: Email already exists
        - 422 Unprocessable Entity: Invalid input (handled by FastAPI)
    """
    command = SignupCommand(email=request.email, password=request.password)

    result = await SignupUseCase(uow, auth).execute(command)

    if result.is_err():
        raise_for_error(
            result.error,
            {**INVALID_PASSWORD, "EMAIL_ALREADY_EXISTS": status.HTTP_409_CONFLICT},
        )

    return result.value


class LoginRequest(BaseModel):
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(
    request: LoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    auth: AuthServices = Depends(get_auth_services),
):
    """
    User Login

    Opens a new session and returns an access token plus the session token.

    Raises:
        - 401 Unauthorized: INVALID_OR_EXPIRED (unknown email, wrong password, disabled user)
        - 403 Forbidden: SESSION_LIMIT_REACHED
        - 503 Service Unavailable: storage failure
    """
    result = await LoginUseCase(uow, auth).execute(request.email, request.password)

    if result.is_err():
        raise_for_error(result.error, {"SESSION_LIMIT_REACHED": status.HTTP_403_FORBIDDEN})

    return result.value


class SessionTokenRequest(BaseModel):
    session_token: str = Field(..., description="Session token returned at login")


@router.post("/refresh", status_code=status.HTTP_200_OK, response_model=RefreshTokenResponse)
async def refresh(
    request: SessionTokenRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    auth: AuthServices = Depends(get_auth_services),
):
    """
    Refresh Access Token

    Exchanges a live session token for a new access token.

    Raises:
        - 401 Unauthorized: INVALID_OR_EXPIRED (unknown, expired or revoked session)
        - 503 Service Unavailable: storage failure
    """
    result = await RefreshTokenUseCase(uow, auth).execute(request.session_token)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=LogoutResponse)
async def logout(
    request: SessionTokenRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    auth: AuthServices = Depends(get_auth_services),
):
    """
    Logout (current device)

    Idempotent: an unknown or already revoked session token still answers 200.
    """
    result = await LogoutUseCase(uow, auth).execute(request.session_token)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post("/logout-all", status_code=status.HTTP_200_OK, response_model=LogoutResponse)
async def logout_all(
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
    auth: AuthServices = Depends(get_auth_services),
):
    """
    Logout from all devices

    Requires a valid access token. Access tokens already issued stay valid
    until their own expiry; every session token stops working immediately.
    """
    result = await LogoutAllUseCase(uow, auth).execute(user_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class TokenRequest(BaseModel):
    token: str = Field(..., description="Single-use token from the email link")


@router.post("/verify-email", status_code=status.HTTP_200_OK, response_model=StatusResponse)
async def verify_email(
    request: TokenRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    auth: AuthServices = Depends(get_auth_services),
):
    """
    Email Verification

    Raises:
        - 401 Unauthorized: INVALID_OR_EXPIRED (forged, consumed or superseded token)
    """
    result = await VerifyEmailUseCase(uow, auth).execute(request.token)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class EmailRequest(BaseModel):
    email: EmailStr = Field(..., description="User email address")


@router.post("/resend-verification", status_code=status.HTTP_200_OK, response_model=StatusResponse)
async def resend_verification(
    request: EmailRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    auth: AuthServices = Depends(get_auth_services),
):
    """
    Resend Verification Email

    Security:
        - No email enumeration (same response for valid/invalid emails)
        - The previous verification token stops working
    """
    result = await ResendVerificationUseCase(uow, auth).execute(request.email)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post("/request-password-reset", status_code=status.HTTP_200_OK, response_model=StatusResponse)
async def request_password_reset(
    request: EmailRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    auth: AuthServices = Depends(get_auth_services),
):
    """
    Request Password Reset

    Security:
        - No email enumeration (same response for valid/invalid emails)
        - Only the keyed digest of the token is stored
    """
    result = await RequestPasswordResetUseCase(uow, auth).execute(request.email)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ConfirmPasswordResetRequest(BaseModel):
    token: str = Field(..., description="Password reset token from email")
    new_password: str = Field(..., description="New password (8 to 72 bytes)")


@router.post("/confirm-password-reset", status_code=status.HTTP_200_OK, response_model=StatusResponse)
async def confirm_password_reset(
    request: ConfirmPasswordResetRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    auth: AuthServices = Depends(get_auth_services),
):
    """
    Confirm Password Reset

    Sets the new password and revokes all existing sessions.

    Raises:
        - 400 Bad Request: INVALID_PASSWORD
        - 401 Unauthorized: INVALID_OR_EXPIRED (forged, consumed, superseded or expired token)
    """
    result = await ConfirmPasswordResetUseCase(uow, auth).execute(
        request.token, request.new_password
    )

    if result.is_err():
        raise_for_error(result.error, INVALID_PASSWORD)

    return result.value


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., description="Current password")
    new_password: str = Field(..., description="New password (8 to 72 bytes)")


@router.post("/change-password", status_code=status.HTTP_200_OK, response_model=StatusResponse)
async def change_password(
    request: ChangePasswordRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
    auth: AuthServices = Depends(get_auth_services),
):
    """
    Change Password

    Requires a valid access token and the current password. Every session of
    the user is revoked.
    """
    result = await ChangePasswordUseCase(uow, auth).execute(
        user_id, request.current_password, request.new_password
    )

    if result.is_err():
        raise_for_error(result.error, INVALID_PASSWORD)

    return result.value


@router.get("/me", status_code=status.HTTP_200_OK, response_model=CurrentUserResponse)
async def me(
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
    auth: AuthServices = Depends(get_auth_services),
):
    result = await GetCurrentUserUseCase(uow, auth).execute(user_id)

    if result.is_err():
        raise_for_error(result.error, {"USER_NOT_FOUND": status.HTTP_404_NOT_FOUND})

    return result.value
