"""
Authentication Use Cases

All authentication and session lifecycle business logic.
"""

from .signup_use_case import SignupUseCase
from .login_use_case import LoginUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .logout_use_case import LogoutUseCase, LogoutAllUseCase
from .verify_email_use_case import VerifyEmailUseCase
from .resend_verification_use_case import ResendVerificationUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .confirm_password_reset_use_case import ConfirmPasswordResetUseCase
from .change_password_use_case import ChangePasswordUseCase
from .get_current_user_use_case import GetCurrentUserUseCase
from .dtos import (
    SignupCommand,
    SignupResponse,
    UserInfo,
    LoginResponse,
    RefreshTokenResponse,
    LogoutResponse,
    StatusResponse,
    CurrentUserResponse,
)

__all__ = [
    # Use Cases
    "SignupUseCase",
    "LoginUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "LogoutAllUseCase",
    "VerifyEmailUseCase",
    "ResendVerificationUseCase",
    "RequestPasswordResetUseCase",
    "ConfirmPasswordResetUseCase",
    "ChangePasswordUseCase",
    "GetCurrentUserUseCase",
    # DTOs - Commands
    "SignupCommand",
    # DTOs - Responses
    "SignupResponse",
    "LoginResponse",
    "RefreshTokenResponse",
    "LogoutResponse",
    "StatusResponse",
    "CurrentUserResponse",
    # DTOs - Nested Models
    "UserInfo",
]
