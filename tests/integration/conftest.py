import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from marketplace_auth.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from marketplace_auth.api.app import create_app
from marketplace_auth.depends import get_unit_of_work
from marketplace_auth.domain.entities import User, UserSession  # noqa: F401
from tests.fixtures.doubles import FrozenClock, RecordingTokenDelivery, TestConfig


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def config():
    return TestConfig


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def delivery():
    return RecordingTokenDelivery()


@pytest.fixture
def app(config, delivery, clock):
    return create_app(config, token_delivery=delivery, clock=clock)


@pytest.fixture
def auth(app):
    return app.state.auth


@pytest_asyncio.fixture
async def client(app, db_session):
    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session, app.state.auth_settings)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
