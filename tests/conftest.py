import pytest
from typing import AsyncGenerator, Generator
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from ascend.config import Settings
from ascend.db import Database
from ascend.main import create_app
from ascend.metrics import AppMetrics
from ascend.models import Goal
from ascend.services.goal_service import GoalStore


# file-backed so every pooled connection sees the same database
@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        db_url=f"sqlite+aiosqlite:///{tmp_path / 'ascend-test.db'}",
        rate_limit_enabled=False,
        enable_metrics=False,
        seed_demo_data=False,
    )


@pytest.fixture
def client(settings) -> Generator[TestClient, None, None]:
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture
async def database(settings) -> AsyncGenerator[Database, None]:
    database = Database(settings)
    await database.create_tables()
    yield database
    await database.dispose()


@pytest.fixture
async def db(database: Database) -> AsyncGenerator[AsyncSession, None]:
    async with database.session() as session:
        yield session


@pytest.fixture
def metrics() -> AppMetrics:
    return AppMetrics()


@pytest.fixture
def store(db: AsyncSession, metrics: AppMetrics) -> GoalStore:
    return GoalStore(db, metrics)


@pytest.fixture
async def goal(store: GoalStore) -> Goal:
    return await store.create_goal({"title": "Test goal", "description": "write every day"})
