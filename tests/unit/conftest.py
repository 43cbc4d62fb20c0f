import pytest
from unittest.mock import AsyncMock, MagicMock

from marketplace_auth.app.services.auth_services import build_auth_services
from tests.fixtures.doubles import FrozenClock, RecordingTokenDelivery, make_settings


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    # Every repository method is awaitable; tests set return values per case
    uow.users = AsyncMock()
    uow.sessions = AsyncMock()
    return uow


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def delivery():
    return RecordingTokenDelivery()


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def auth(settings, delivery, clock):
    return build_auth_services(settings, delivery, clock)
