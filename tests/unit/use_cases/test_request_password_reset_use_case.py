from datetime import timedelta

import pytest

from marketplace_auth.app.use_cases.auth.request_password_reset_use_case import (
    RequestPasswordResetUseCase,
)
from marketplace_auth.domain.entities import TokenPurpose, User


@pytest.mark.asyncio
async def test_known_email_gets_a_reset_token(mock_uow, auth, clock, delivery):
    user = User(email="user@example.com", password_hash="hash")
    mock_uow.users.get_by_email.return_value = user
    mock_uow.users.set_reset_token.return_value = 1

    result = await RequestPasswordResetUseCase(mock_uow, auth).execute("User@Example.com")

    assert result.is_ok()
    mock_uow.users.get_by_email.assert_called_once_with("user@example.com")
    assert len(delivery.password_resets) == 1
    email, token = delivery.password_resets[0]
    assert email == "user@example.com"

    # Only the digest is stored, with the signed expiry
    mock_uow.users.set_reset_token.assert_called_once_with(
        user.id,
        auth.tokens.digest_single_use_token(token),
        clock.now() + timedelta(hours=1),
    )
    assert auth.tokens.read_single_use_token(token, TokenPurpose.password_reset) == user.id
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_unknown_email_gets_the_same_response(mock_uow, auth, delivery):
    user = User(email="user@example.com", password_hash="hash")
    mock_uow.users.get_by_email.return_value = user
    known = await RequestPasswordResetUseCase(mock_uow, auth).execute("user@example.com")

    mock_uow.users.get_by_email.return_value = None
    mock_uow.users.set_reset_token.reset_mock()
    unknown = await RequestPasswordResetUseCase(mock_uow, auth).execute("ghost@example.com")

    assert unknown.is_ok()
    assert unknown.value == known.value
    mock_uow.users.set_reset_token.assert_not_called()
    assert len(delivery.password_resets) == 1


@pytest.mark.asyncio
async def test_each_request_supersedes_the_previous_token(mock_uow, auth, delivery):
    user = User(email="user@example.com", password_hash="hash")
    mock_uow.users.get_by_email.return_value = user
    use_case = RequestPasswordResetUseCase(mock_uow, auth)

    await use_case.execute("user@example.com")
    await use_case.execute("user@example.com")

    first, second = (token for _, token in delivery.password_resets)
    assert first != second
    stored = [call.args[1] for call in mock_uow.users.set_reset_token.call_args_list]
    assert stored == [
        auth.tokens.digest_single_use_token(first),
        auth.tokens.digest_single_use_token(second),
    ]
