"""
User Entity

The principal: identity root for every session and single-use token.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow
from .enums import UserStatus


class User(SQLModel, table=True):
    """
    User entity - the login principal.

    Business Rules:
    - Email is the login handle, unique and stored lower-cased
    - Password stored as bcrypt hash
    - At most one live verification token and one live reset token;
      issuing a new one overwrites (supersedes) the previous digest
    - Token digests are cleared in the same UPDATE that applies their effect
    - Never deleted by the auth service
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    status: UserStatus = Field(default=UserStatus.active)

    # Email verification
    email_verified: bool = Field(default=False)
    verification_token_hash: Optional[str] = Field(
        default=None, unique=True, index=True, max_length=64
    )

    # Password reset
    reset_token_hash: Optional[str] = Field(
        default=None, unique=True, index=True, max_length=64
    )
    reset_token_expires_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime, nullable=True)
    )

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    password_changed_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    __table_args__ = (Index("idx_user_email_verified", "email_verified"),)

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.active
