import os

# Settings are read at import time; point them at SQLite before anything loads
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ENVIRONMENT", "development")

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from relations_api.database import Base
from relations_api.models import User

ALICE = "uid-alice"
BOB = "uid-bob"
CAROL = "uid-carol"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def users(db):
    """alice, bob and carol, registered and committed."""
    db.add_all([
        User(id=ALICE, username="alice"),
        User(id=BOB, username="bob"),
        User(id=CAROL, username="carol"),
    ])
    await db.commit()
    return {"alice": ALICE, "bob": BOB, "carol": CAROL}


async def count_rows(db, model, *criteria) -> int:
    stmt = select(func.count()).select_from(model)
    if criteria:
        stmt = stmt.where(*criteria)
    result = await db.execute(stmt)
    return result.scalar_one()


def stale_once(monkeypatch, repository, method: str) -> None:
    """Make the first call to ``repository.method`` miss, as a read taken
    just before a concurrent commit would; later calls read the real state."""
    real = getattr(repository, method)
    calls = []

    async def lookup(self, *args):
        calls.append(args)
        if len(calls) == 1:
            return None
        return await real(self, *args)

    monkeypatch.setattr(repository, method, lookup)
