import asyncio
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from app.core.database import Base, get_db
from app.main import app
from app.services.storage_service import LocalStorageService, get_storage_service


@pytest.fixture()
def storage(tmp_path: Path) -> LocalStorageService:
    return LocalStorageService(upload_dir=str(tmp_path / "uploads"), url_prefix="/uploads/")


@pytest.fixture()
def engine(tmp_path: Path):
    # NullPool: every session opens its own connection, so sessions can be
    # used from different event loops (asyncio.run and the TestClient portal)
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)

    async def create_all():
        async with test_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(create_all())
    yield test_engine
    asyncio.run(test_engine.dispose())


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
def client(monkeypatch, session_factory, storage):
    async def fake_create_tables():
        return None

    async def fake_dispose_engine():
        return None

    async def override_get_db():
        async with session_factory() as session:
            yield session

    monkeypatch.setattr("app.main.create_tables", fake_create_tables)
    monkeypatch.setattr("app.main.dispose_engine", fake_dispose_engine)
    monkeypatch.setattr("app.main.storage_service", storage)
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage_service] = lambda: storage

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
