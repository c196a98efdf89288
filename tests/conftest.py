"""Pytest configuration shared across the suite."""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from pathlib import Path

_DEFAULT_ENV_VARS: dict[str, str] = {
    "DB_URL": "sqlite+aiosqlite:///:memory:",
    "OAUTH_BASE_URL": "https://oauth.example.test",
    "OAUTH_CLIENT_ID": "100001",
    "OAUTH_CLIENT_SECRET": "test-client-secret",
    "OAUTH_REDIRECT_URI": "https://app.example.test/oauth/callback",
    "JWT_SECRET": "test-jwt-secret",
}

# Settings are read when account_service.core.config is first imported
for key, value in _DEFAULT_ENV_VARS.items():
    os.environ.setdefault(key, value)

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession  # noqa: E402

from account_service.clients.oauth_provider import UpstreamTokens  # noqa: E402
from account_service.core.errors import UpstreamError  # noqa: E402
from account_service.models import (  # noqa: E402, F401
    oauth_state,
    oauth_tokens,
    refresh_token,
    user,
    user_token,
)
from account_service.services.session import SessionService  # noqa: E402


class FakeOAuthProvider:
    """Stands in for OAuthProviderClient; records calls and can be told to fail."""

    def __init__(self, account_id: str = "acct-42") -> None:
        self.account_id = account_id
        self.exchange_error: UpstreamError | None = None
        self.identity_error: UpstreamError | None = None
        self.exchanges: list[tuple[str, str]] = []
        self._issued = 0

    async def exchange_code_for_token(self, code: str, redirect_uri: str) -> UpstreamTokens:
        self.exchanges.append((code, redirect_uri))
        if self.exchange_error:
            raise self.exchange_error
        self._issued += 1
        return UpstreamTokens(
            access_token=f"ext{self._issued}", refresh_token=f"ext-rt{self._issued}"
        )

    async def get_account_id(self, access_token: str) -> str:
        if self.identity_error:
            raise self.identity_error
        return self.account_id


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    async with AsyncSession(engine, autoflush=False, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def oauth_provider() -> FakeOAuthProvider:
    return FakeOAuthProvider()


@pytest.fixture
def service(db: AsyncSession, oauth_provider: FakeOAuthProvider) -> SessionService:
    return SessionService(db=db, oauth=oauth_provider)  # pyright: ignore[reportArgumentType]


@pytest.fixture
async def client(
    engine: AsyncEngine, oauth_provider: FakeOAuthProvider
) -> AsyncGenerator[httpx.AsyncClient]:
    from account_service.clients.oauth_provider import get_oauth_client
    from account_service.core.db import get_db
    from account_service.main import app

    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        async with AsyncSession(engine, autoflush=False, expire_on_commit=False) as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_oauth_client] = lambda: oauth_provider

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver"
    ) as client:
        yield client

    app.dependency_overrides.clear()
