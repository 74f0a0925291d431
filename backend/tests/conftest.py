import os

# Use in-memory sqlite for tests; must be set before runlog is imported
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"

from datetime import timedelta

import httpx
import pytest
import pytest_asyncio

from runlog.client.api import GoalsApiClient
from runlog.client.store import GoalStore
from runlog.core.time_utils import utcnow
from runlog.db import Base, SessionLocal, engine
from runlog.main import app
from runlog.models.run import Run

USER = "runner-1"


class CountingTransport(httpx.ASGITransport):
    """ASGI transport that remembers every request it forwards."""

    def __init__(self, app):
        super().__init__(app=app)
        self.requests: list[tuple[str, str]] = []

    async def handle_async_request(self, request):
        self.requests.append((request.method, request.url.path))
        return await super().handle_async_request(request)


def goal_data(**overrides) -> dict:
    now = utcnow()
    data = {
        "title": "20 miles this month",
        "type": "DISTANCE",
        "period": "MONTHLY",
        "targetValue": 20,
        "targetUnit": "miles",
        "startDate": (now - timedelta(days=7)).isoformat(),
        "endDate": (now + timedelta(days=23)).isoformat(),
    }
    data.update(overrides)
    return data


def log_run(miles: float, seconds: int = 2700, user_id: str = USER, day=None) -> None:
    db = SessionLocal()
    try:
        db.add(
            Run(
                user_id=user_id,
                date=day or utcnow().date(),
                title="Run",
                distance_mi=miles,
                duration_seconds=seconds,
            )
        )
        db.commit()
    finally:
        db.close()


@pytest.fixture(autouse=True)
def clean_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def transport():
    return CountingTransport(app)


@pytest_asyncio.fixture
async def api(transport):
    async with GoalsApiClient("http://testserver", USER, transport=transport) as client:
        yield client


@pytest.fixture
def store(api):
    return GoalStore(api)
