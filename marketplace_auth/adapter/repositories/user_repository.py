from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from marketplace_auth.app.repositories.user_repository import IUserRepository
from marketplace_auth.domain.entities import User
from marketplace_auth.domain.errors import EmailAlreadyExistsError


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        stmt = select(User).where(User.email == email)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, user: User) -> User:
        """Create a new user"""
        email = user.email
        try:
            async with self.session.begin_nested():
                self.session.add(user)
        except IntegrityError as exc:
            raise EmailAlreadyExistsError(f"email {email} already registered") from exc
        await self.session.refresh(user)
        return user

    async def update(self, user: User) -> User:
        """Update existing user"""
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def set_reset_token(
        self, user_id: UUID, token_hash: str, expires_at: datetime
    ) -> int:
        """Overwrite the reset token digest and expiry"""
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(reset_token_hash=token_hash, reset_token_expires_at=expires_at)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def consume_reset_token(
        self, user_id: UUID, token_hash: str, password_hash: str, now: datetime
    ) -> int:
        """Set the new password and clear the reset token in one UPDATE"""
        stmt = (
            update(User)
            .where(User.id == user_id, User.reset_token_hash == token_hash)
            .values(
                password_hash=password_hash,
                password_changed_at=now,
                reset_token_hash=None,
                reset_token_expires_at=None,
            )
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def set_verification_token(self, user_id: UUID, token_hash: str) -> int:
        """Overwrite the verification token digest"""
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(verification_token_hash=token_hash)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def consume_verification_token(self, user_id: UUID, token_hash: str) -> int:
        """Mark the email verified and clear the token in one UPDATE"""
        stmt = (
            update(User)
            .where(User.id == user_id, User.verification_token_hash == token_hash)
            .values(email_verified=True, verification_token_hash=None)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def update_password(
        self, user_id: UUID, password_hash: str, now: datetime
    ) -> int:
        """Set a new password hash and drop any outstanding reset token"""
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(
                password_hash=password_hash,
                password_changed_at=now,
                reset_token_hash=None,
                reset_token_expires_at=None,
            )
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
