"""
UserSession Entity

One row per authenticated device/browser.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow


class UserSession(SQLModel, table=True):
    """
    UserSession entity - backs a long-lived login.

    Business Rules:
    - token_hash is a keyed digest of the opaque session token; the raw
      token only ever lives with the client
    - token_hash is unique system-wide (it is the lookup key)
    - A user may own many concurrent sessions (multi-device)
    - Valid only while now < expires_at; expired rows are swept periodically
    - Deleted on logout, logout-all, password change/reset, or by the sweep
    """

    __tablename__ = "user_sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    token_hash: str = Field(unique=True, index=True, max_length=64)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))

    __table_args__ = (Index("idx_user_session_expires_at", "expires_at"),)

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
