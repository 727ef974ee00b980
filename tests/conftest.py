import os
import uuid

# Point the application's default engine at SQLite before it is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("APP_ENV", "production")

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from civic_reporter.database import models
from civic_reporter.database.config import Base, get_db
from civic_reporter.storage import LocalMediaStorage, get_media_storage
from main import app


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest_asyncio.fixture
async def client(session_factory, upload_dir, monkeypatch):
    monkeypatch.delenv("SLACK_WEBHOOK_URL", raising=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_media_storage] = lambda: LocalMediaStorage(upload_dir)

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def citizen(db):
    citizen = models.Citizen(full_name="Asha Verma", email="asha@example.com", phone="9800000001")
    db.add(citizen)
    await db.commit()
    return citizen


@pytest_asyncio.fixture
async def pwd_admin(db):
    admin = models.Admin(
        full_name="Ravi Kulkarni",
        email="Ravi.Kulkarni@PWD.example.gov",
        phone="9800000002",
        department="PWD",
        access_code=1001,
    )
    db.add(admin)
    await db.commit()
    return admin


@pytest_asyncio.fixture
async def mcd_admin(db):
    admin = models.Admin(
        full_name="Meera Das",
        email="meera@mcd.example.gov",
        phone="9800000003",
        department="MCD",
        access_code=1002,
    )
    db.add(admin)
    await db.commit()
    return admin


@pytest.fixture
def make_issue(db):
    """Insert an issue directly, bypassing the intake workflow."""

    async def _make_issue(citizen_id, **overrides):
        fields = {
            "code": f"RP-TEST-{uuid.uuid4().hex[:8]}",
            "citizen_id": citizen_id,
            "title": f"Pothole near gate {uuid.uuid4().hex[:6]}",
            "description": "Deep pothole on the left lane",
            "latitude": 12.9,
            "longitude": 77.6,
            "department": "PWD",
        }
        fields.update(overrides)
        issue = models.Issue(**fields)
        db.add(issue)
        await db.commit()
        return issue

    return _make_issue


def citizen_headers(citizen):
    return {"X-Citizen-Id": citizen.id, "X-Role": "citizen"}


def admin_headers(admin):
    return {"X-Role": "admin", "X-Admin-Id": admin.id}
