"""
Validated authentication settings.

Built only by the secret validator; the token codec, password hasher and
session store take this object at construction time instead of reading
global configuration at call time.
"""

from datetime import timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AuthSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    jwt_secret: str = Field(repr=False)
    session_token_secret: str = Field(repr=False)
    action_token_secret: str = Field(repr=False)
    jwt_algorithm: str = "HS256"

    access_token_ttl: timedelta = timedelta(minutes=15)
    session_ttl: timedelta = timedelta(days=30)
    password_reset_ttl: timedelta = timedelta(hours=1)

    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # Concurrent session cap per user; None disables the policy
    max_active_sessions: Optional[int] = Field(default=None, ge=1)
    rotate_session_tokens: bool = False

    session_sweep_enabled: bool = True
    session_sweep_interval: timedelta = timedelta(hours=1)


class AuthPolicy(BaseModel):
    """
    Tunable policy values as they come out of env.yaml or the environment.

    Strings such as "15", "yes" or "" are accepted and converted here, so
    ApplicationConfig can pass these keys through untouched.
    """

    access_token_ttl_minutes: int = Field(default=15, ge=1)
    session_ttl_days: int = Field(default=30, ge=1)
    password_reset_ttl_minutes: int = Field(default=60, ge=1)
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)
    max_active_sessions: Optional[int] = Field(default=None, ge=1)
    rotate_session_tokens: bool = False
    session_sweep_enabled: bool = True
    session_sweep_interval_seconds: int = Field(default=3600, ge=1)

    @field_validator("max_active_sessions", mode="before")
    @classmethod
    def blank_means_unlimited(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value
