"""
Signup Use Case

Registers a user and issues the first email verification token.
"""

import logging

from fastapi.concurrency import run_in_threadpool

from marketplace_auth.app.services.auth_services import AuthServices
from marketplace_auth.app.services.unit_of_work import UnitOfWork
from marketplace_auth.app.use_cases.failures import infrastructure_failure
from marketplace_auth.domain.base import normalize_email
from marketplace_auth.domain.entities import TokenPurpose, User
from marketplace_auth.domain.errors import EmailAlreadyExistsError, InfrastructureError
from marketplace_auth.libs.result import Error, Result, Return
from .dtos import SignupCommand, SignupResponse, UserInfo
from .password_policy import validate_password

logger = logging.getLogger(__name__)


class SignupUseCase:
    """
    Signup Use Case

    Business Logic:
    1. Validate password policy
    2. Reject an email that is already registered
    3. Hash password with bcrypt
    4. Create User with email_verified=False and a verification token digest
    5. Commit, then hand the raw token to the delivery collaborator

    Signup does not open a session; the user logs in separately.
    """

    def __init__(self, uow: UnitOfWork, auth: AuthServices):
        self.uow = uow
        self.auth = auth

    async def execute(self, command: SignupCommand) -> Result[SignupResponse]:
        """
        Execute signup use case

        Args:
            command: SignupCommand with email and password

        Returns:
            Result[SignupResponse], or Error(EMAIL_ALREADY_EXISTS / INVALID_PASSWORD)
        """
        password_check = validate_password(command.password)
        if password_check.is_err():
            return password_check

        email = normalize_email(command.email)
        try:
            async with self.uow:
                existing_user = await self.uow.users.get_by_email(email)
                if existing_user:
                    return Return.err(
                        Error("EMAIL_ALREADY_EXISTS", "Email already registered")
                    )

                password_hash = await run_in_threadpool(self.auth.passwords.hash, command.password)
                user = User(
                    email=email,
                    password_hash=password_hash,
                    email_verified=False,
                )
                verification = self.auth.tokens.mint_single_use_token(
                    user.id, TokenPurpose.email_verification
                )
                user.verification_token_hash = verification.digest
                user = await self.uow.users.create(user)
                info = UserInfo(
                    id=str(user.id),
                    email=user.email,
                    email_verified=user.email_verified,
                )

                await self.uow.commit()
        except EmailAlreadyExistsError:
            # Lost a race with a concurrent signup for the same address
            return Return.err(Error("EMAIL_ALREADY_EXISTS", "Email already registered"))
        except InfrastructureError as exc:
            return infrastructure_failure("signup", exc)

        await self.auth.delivery.send_email_verification(info.email, verification.token)
        logger.info(f"User {info.id} registered")

        return Return.ok(
            SignupResponse(
                user=info,
                message="Account created. Check your email to verify your address.",
            )
        )
