from __future__ import annotations
import io
import os

# Settings are read at import time; point everything at test backends first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["STORAGE_BACKEND"] = "local"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ADMIN_SETUP_KEY"] = "test-setup-key"
os.environ["JWT_SECRET"] = "test-secret"

from datetime import datetime, timezone
import httpx
import pytest
import pytest_asyncio
from PIL import Image
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from scavenger.main import app
from scavenger.db import Base, get_session
from scavenger.models.task import Task
from scavenger.models.team import Team
from scavenger.security import hash_password, make_access_token
from scavenger.services.clock import FrozenClock, get_clock
from scavenger.services.storage import LocalBlobStore, get_blob_store

GAME_START = datetime(2026, 6, 1, 12, 0, 0, tzinfo=timezone.utc)
PASSWORD = "pass1234"


def png_bytes(color=(255, 0, 0), size=(64, 64), fmt="PNG") -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format=fmt)
    return buf.getvalue()


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def token_for(team: Team) -> str:
    return make_access_token(str(team.id), team.name, team.role)


@pytest_asyncio.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://", poolclass=StaticPool, connect_args={"check_same_thread": False}
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


@pytest.fixture
def clock():
    return FrozenClock(GAME_START)


@pytest.fixture
def store(tmp_path):
    return LocalBlobStore(tmp_path / "uploads")


@pytest_asyncio.fixture
async def client(session_factory, clock, store):
    async def _session():
        async with session_factory() as s:
            yield s

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_blob_store] = lambda: store
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def add_team(session_factory, name: str, role: str = "team", queue=None) -> Team:
    async with session_factory() as s:
        team = Team(
            name=name,
            password_hash=hash_password(PASSWORD),
            role=role,
            avatar_color="#ffd700" if role == "admin" else "#00f0ff",
            task_queue=[str(t) for t in (queue or [])],
        )
        s.add(team)
        await s.commit()
        await s.refresh(team)
        return team


async def add_task(session_factory, title: str = "Fountain", points: int = 100, order: int = 0, **kw) -> Task:
    async with session_factory() as s:
        task = Task(
            title=title,
            description=kw.pop("description", f"Riddle for {title}"),
            location_hint=kw.pop("location_hint", "Old town"),
            detailed_hint=kw.pop("detailed_hint", f"Look behind the {title.lower()}"),
            points=points,
            order=order,
            lat=kw.pop("lat", 52.23),
            lng=kw.pop("lng", 21.01),
            **kw,
        )
        s.add(task)
        await s.commit()
        await s.refresh(task)
        return task


@pytest_asyncio.fixture
async def admin(session_factory) -> Team:
    return await add_team(session_factory, "Organisers", role="admin")


@pytest_asyncio.fixture
async def team(session_factory) -> Team:
    return await add_team(session_factory, "Red Foxes")


@pytest_asyncio.fixture
async def task(session_factory) -> Task:
    return await add_task(session_factory, "Fountain", points=100)
