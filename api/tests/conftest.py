from __future__ import annotations

import os
from typing import Any

os.environ.setdefault("JOBLY_SECRET_KEY", "test-secret")
os.environ.setdefault("JOBLY_BCRYPT_WORK_FACTOR", "4")
os.environ.setdefault("JOBLY_OTEL_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient

from jobly.core.config import get_settings
from jobly.core.security import create_token
from jobly.main import app
from jobly.services.database import get_database


class RecordingDatabase:
    """Fake query collaborator: replays queued results and records statements."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self._results: list[Any] = []

    def queue(self, *results: Any) -> None:
        self._results.extend(results)

    @property
    def statements(self) -> list[str]:
        return [statement for statement, _ in self.calls]

    async def fetch(self, query: str, *args: Any) -> list[dict[str, Any]]:
        self.calls.append((" ".join(query.split()), args))
        if not self._results:
            return []
        result = self._results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def recording_db() -> RecordingDatabase:
    return RecordingDatabase()


@pytest.fixture
def api_client(recording_db: RecordingDatabase) -> TestClient:
    app.dependency_overrides[get_database] = lambda: recording_db

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers() -> dict[str, str]:
    token = create_token("admin", is_admin=True, settings=get_settings())
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers() -> dict[str, str]:
    token = create_token("u1", is_admin=False, settings=get_settings())
    return {"Authorization": f"Bearer {token}"}
