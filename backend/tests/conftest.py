"""
Pytest configuration and shared fixtures.

Fixtures:
    - open_storage: async context factory for a fresh storage, parametrized
      over the SQL backend (temporary SQLite file) and the JSON file backend
    - run_with_storage: run an async scenario against ``open_storage``
    - client: TestClient whose ``get_storage`` dependency uses ``open_storage``
    - make_user / auth_headers: users and bearer tokens for identity-bound routes
"""
import asyncio
import os
from contextlib import asynccontextmanager

# Configure before any planner module builds its settings or engine
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from planner import models  # noqa: F401
from planner.api.deps import create_access_token, get_storage
from planner.database import Base
from planner.main import app
from planner.schemas import UserCreate
from planner.storage import JsonFileStorage, SqlStorage


async def _create_tables(engine):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture(params=["sql", "json"])
def open_storage(request, tmp_path):
    """Factory of request-scoped storages sharing one temporary store."""
    if request.param == "sql":
        engine = create_async_engine(
            f"sqlite+aiosqlite:///{tmp_path / 'planner.db'}",
            poolclass=NullPool,
        )
        asyncio.run(_create_tables(engine))
        session_factory = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)

        @asynccontextmanager
        async def factory():
            async with session_factory() as session:
                yield SqlStorage(session)

        yield factory
        asyncio.run(engine.dispose())
    else:
        data_dir = tmp_path / "data"

        @asynccontextmanager
        async def factory():
            yield JsonFileStorage(str(data_dir))

        yield factory


@pytest.fixture
def run_with_storage(open_storage):
    def run(scenario):
        async def main():
            async with open_storage() as storage:
                return await scenario(storage)

        return asyncio.run(main())

    return run


@pytest.fixture
def client(open_storage):
    async def override_get_storage():
        async with open_storage() as storage:
            yield storage

    app.dependency_overrides[get_storage] = override_get_storage
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(run_with_storage):
    def make(name="Ana Rojas", email=None):
        email = email or name.lower().replace(" ", ".") + "@example.com"
        initials = "".join(part[0] for part in name.split()).upper()[:2]
        return run_with_storage(
            lambda storage: storage.create_user(
                UserCreate(name=name, email=email, initials=initials)
            )
        )

    return make


@pytest.fixture
def auth_headers():
    def headers(user):
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return headers
