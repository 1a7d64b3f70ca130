import os

# Settings are read at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["TESTING"] = "true"
os.environ["BCRYPT_ROUNDS"] = "4"

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import rentals.infrastructure.orm  # noqa: F401
from rentals.api.dependencies import get_broadcaster, get_identity_providers
from rentals.api.event_broadcaster import InvalidationBroadcaster
from rentals.db.database import get_db
from rentals.db.models import Base
from rentals.domain.value_objects.session import SessionIdentity
from rentals.infrastructure.external_services.identity_providers import (
    ExternalIdentity,
    IdentityProviderRegistry,
)
from rentals.infrastructure.repositories.unit_of_work_impl import UnitOfWorkImpl
from rentals.main import app

from .factories import StubIdentityProvider, add_user


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, autoflush=False, expire_on_commit=False)


@pytest.fixture
async def uow(session_factory):
    async with session_factory() as session:
        yield UnitOfWorkImpl(session)


@pytest.fixture
def invalidator():
    return InvalidationBroadcaster()


@pytest.fixture
def external_identity():
    return ExternalIdentity(
        provider="google",
        subject="google-sub-1",
        email="Social.User@rentals.io",
        first_name="Social",
        last_name="User",
        email_verified=True,
    )


@pytest.fixture
def stub_provider(external_identity):
    return StubIdentityProvider(external_identity)


@pytest.fixture
def providers(stub_provider):
    return IdentityProviderRegistry([stub_provider])


@pytest.fixture
async def client(session_factory, invalidator, providers):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_broadcaster] = lambda: invalidator
    app.dependency_overrides[get_identity_providers] = lambda: providers

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def admin_user(uow):
    return await add_user(uow, email="admin@rentals.io", first_name="Ada", last_name="Admin", isadmin=True)


@pytest.fixture
def admin_identity(admin_user):
    return admin_user.to_identity()


@pytest.fixture
def regular_identity():
    return SessionIdentity(id="00000000-0000-0000-0000-000000000001", name="Reg User", isadmin=False)
