import pytest

from marketplace_auth.app.use_cases.auth.dtos import SignupCommand
from marketplace_auth.app.use_cases.auth.signup_use_case import SignupUseCase
from marketplace_auth.domain.entities import TokenPurpose, User
from marketplace_auth.domain.errors import EmailAlreadyExistsError, InfrastructureError


async def return_user(user):
    return user


@pytest.mark.asyncio
async def test_successful_signup(mock_uow, auth, delivery):
    mock_uow.users.get_by_email.return_value = None
    mock_uow.users.create.side_effect = return_user

    command = SignupCommand(email="New.User@Example.com", password="SecurePass123!")
    result = await SignupUseCase(mock_uow, auth).execute(command)

    assert result.is_ok()
    data = result.value
    assert data.user.email == "new.user@example.com"
    assert data.user.email_verified is False

    created: User = mock_uow.users.create.call_args.args[0]
    assert auth.passwords.verify("SecurePass123!", created.password_hash)

    # Verification token goes out only after commit, and only its digest is stored
    mock_uow.commit.assert_called_once()
    email, token = delivery.verifications[0]
    assert email == "new.user@example.com"
    assert created.verification_token_hash == auth.tokens.digest_single_use_token(token)
    assert (
        auth.tokens.read_single_use_token(token, TokenPurpose.email_verification) == created.id
    )


@pytest.mark.asyncio
async def test_signup_does_not_open_a_session(mock_uow, auth):
    mock_uow.users.get_by_email.return_value = None
    mock_uow.users.create.side_effect = return_user

    await SignupUseCase(mock_uow, auth).execute(
        SignupCommand(email="user@example.com", password="SecurePass123!")
    )

    mock_uow.sessions.create.assert_not_called()


@pytest.mark.asyncio
async def test_email_already_exists(mock_uow, auth, delivery):
    mock_uow.users.get_by_email.return_value = User(email="user@example.com", password_hash="x")

    result = await SignupUseCase(mock_uow, auth).execute(
        SignupCommand(email="user@example.com", password="SecurePass123!")
    )

    assert result.is_err()
    assert result.error.code == "EMAIL_ALREADY_EXISTS"
    mock_uow.users.create.assert_not_called()
    assert delivery.verifications == []


@pytest.mark.asyncio
async def test_concurrent_signup_for_same_email(mock_uow, auth, delivery):
    # Both requests passed the lookup; the unique index rejects the second insert
    mock_uow.users.get_by_email.return_value = None
    mock_uow.users.create.side_effect = EmailAlreadyExistsError("duplicate")

    result = await SignupUseCase(mock_uow, auth).execute(
        SignupCommand(email="user@example.com", password="SecurePass123!")
    )

    assert result.is_err()
    assert result.error.code == "EMAIL_ALREADY_EXISTS"
    mock_uow.commit.assert_not_called()
    assert delivery.verifications == []


@pytest.mark.asyncio
@pytest.mark.parametrize("password", ["short", "x" * 73, "é" * 40])
async def test_password_policy(mock_uow, auth, password):
    result = await SignupUseCase(mock_uow, auth).execute(
        SignupCommand(email="user@example.com", password=password)
    )

    assert result.is_err()
    assert result.error.code == "INVALID_PASSWORD"
    mock_uow.users.get_by_email.assert_not_called()


@pytest.mark.asyncio
async def test_storage_failure(mock_uow, auth, delivery):
    mock_uow.users.get_by_email.side_effect = InfrastructureError("connection refused")

    result = await SignupUseCase(mock_uow, auth).execute(
        SignupCommand(email="user@example.com", password="SecurePass123!")
    )

    assert result.is_err()
    assert result.error.code == "INFRASTRUCTURE_ERROR"
    assert delivery.verifications == []
