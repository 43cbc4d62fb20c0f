"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for auth domain.
Provides type safety and clear contracts between layers.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


# ============================================================================
# Command DTOs
# ============================================================================


class SignupCommand(BaseModel):
    """
    Signup command - represents validated signup intent

    Created by API layer after request validation passes.
    """

    email: str
    password: str


# ============================================================================
# Response DTOs
# ============================================================================


class UserInfo(BaseModel):
    """User information in auth responses"""

    id: str
    email: str
    email_verified: bool


class SignupResponse(BaseModel):
    """Response for signup use case"""

    user: UserInfo
    message: str


class LoginResponse(BaseModel):
    """Response for user login use case"""

    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    session_token: str
    session_expires_at: datetime


class RefreshTokenResponse(BaseModel):
    """
    Response for refresh token use case

    session_token is only set when rotation-on-refresh is enabled.
    """

    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    session_token: Optional[str] = None


class LogoutResponse(BaseModel):
    """Response for logout and logout-all use cases"""

    status: str
    message: str
    revoked_count: int


class StatusResponse(BaseModel):
    """Status/message response shared by token flows"""

    status: str
    message: str


class CurrentUserResponse(BaseModel):
    """Response for the current user use case"""

    id: str
    email: str
    email_verified: bool
    status: str
    created_at: datetime
    active_sessions: int
