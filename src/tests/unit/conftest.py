"""Shared fixtures for unit tests.

Each test gets a fresh SQLite database file (aiosqlite) with foreign
keys on, a Services container with cheap argon2 parameters, and an
httpx client wired to the app through dependency overrides.
"""

from collections.abc import AsyncIterator
from dataclasses import dataclass
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from blink.app.config import AppConfig, SecurityConfig, Settings
from blink.app.container import Services, build_services, get_services
from blink.app.main import app
from blink.infra import (
    clear_redirect_cache,
    create_engine,
    create_session_factory,
    create_tables,
    get_session,
)

TEST_PASSWORD = "secret12"


@pytest.fixture(autouse=True)
def clear_caches():
    """Clear the redirect lookup cache before and after each test."""
    clear_redirect_cache()
    yield
    clear_redirect_cache()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        app=AppConfig(environment="test"),
        security=SecurityConfig(
            token_secret="test-secret",
            password_time_cost=1,
            password_memory_cost=1024,
            password_parallelism=1,
        ),
    )


@pytest.fixture
def services(settings: Settings) -> Services:
    return build_services(settings)


@pytest.fixture
async def session_factory(tmp_path: Path) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'blink.db'}")
    await create_tables(engine)
    yield create_session_factory(engine)
    await engine.dispose()


@pytest.fixture
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession], services: Services
) -> AsyncIterator[AsyncClient]:
    """ASGI client; the app lifespan is not run, so no real database is touched."""

    async def override_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_services] = lambda: services
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()


@dataclass
class LoggedInUser:
    id: str
    email: str
    access_token: str
    refresh_token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}


async def register_and_login(
    client: AsyncClient, email: str, name: str = "Tester", password: str = TEST_PASSWORD
) -> LoggedInUser:
    response = await client.post(
        "/users", json={"name": name, "email": email, "password": password}
    )
    assert response.status_code == 201, response.text
    user_id = response.json()["id"]

    response = await client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    tokens = response.json()
    # Cookie auth is exercised explicitly; keep the jar clean otherwise
    client.cookies.clear()
    return LoggedInUser(
        id=user_id,
        email=email,
        access_token=tokens["accessToken"],
        refresh_token=tokens["refreshToken"],
    )


@pytest.fixture
def register(client: AsyncClient):
    """Factory: register + login a user through the API."""

    async def _register(email: str, name: str = "Tester") -> LoggedInUser:
        return await register_and_login(client, email, name=name)

    return _register


@pytest.fixture
async def alice(client: AsyncClient) -> LoggedInUser:
    return await register_and_login(client, "alice@example.com", name="Alice")


@pytest.fixture
async def bob(client: AsyncClient) -> LoggedInUser:
    return await register_and_login(client, "bob@example.com", name="Bob")
