"""
Shared fixtures.

Environment is configured before any app module is imported, because
app.config builds its settings at import time.
"""

import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="flippi-tests-")

os.environ["SECRET_KEY"] = "t3st-k3y-9f8e7d6c5b4a39281706f5e4d3c2b1a0"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR}/primary.db"
os.environ["AUTOMATION_DATABASE_URL"] = f"sqlite:///{_TMP_DIR}/automation.db"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_DIR"] = os.path.join(_TMP_DIR, "logs")
os.environ["LEGAL_PAGES_DIR"] = os.path.join(_TMP_DIR, "legal")
os.environ["RATE_LIMIT_STORAGE_URI"] = "memory://"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.api.dependencies import get_automation_tracker
from app.database import Base, get_db
from app.main import create_app
from app.models import RefreshToken, ScanHistory, User  # noqa: F401
from app.services import auth_service, user_service
from app.services.automation_tracker import AutomationTracker, create_session_factory

DEFAULT_PASSWORD = "Str0ng!Pass"


def configure_sqlite(engine) -> None:
    """Foreign keys on, and every transaction takes the write lock up front."""

    @event.listens_for(engine.sync_engine, "connect")
    def on_connect(dbapi_connection, connection_record):
        # Let the begin hook below emit BEGIN instead of the driver
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'primary.db'}")
    configure_sqlite(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def tracker(tmp_path):
    return AutomationTracker(create_session_factory(f"sqlite:///{tmp_path / 'automation.db'}"))


@pytest.fixture
def app(session_factory, tracker):
    application = create_app()

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db] = override_get_db
    application.dependency_overrides[get_automation_tracker] = lambda: tracker
    return application


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


async def make_user(session_factory, email="alice@example.com", username="alice", password=DEFAULT_PASSWORD, role=None):
    """Register a user in its own session; the returned instance is detached."""
    async with session_factory() as session:
        user = await user_service.register(session, email=email, username=username, password=password)
        if role:
            user.role = role
        await session.commit()
    return user


def auth_headers(user) -> dict:
    token = auth_service.create_access_token(data={"sub": str(user.id), "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def user(session_factory):
    return await make_user(session_factory)


@pytest.fixture
async def other_user(session_factory):
    return await make_user(session_factory, email="bob@example.com", username="bob")
