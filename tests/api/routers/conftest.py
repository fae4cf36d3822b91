"""Shared pytest fixtures for router tests.

Routers run against a throwaway SQLite file so the real store, session and
export code paths are exercised; only the vision model and the camera are
mocked.
"""

from contextlib import ExitStack
from typing import AsyncGenerator
from unittest.mock import Mock, patch

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from tutor_reports import models  # noqa: F401
from tutor_reports.database import Base
from tutor_reports.services.enrichment.workflow import EnrichmentWorkflow
from tutor_reports.services.session_state import SessionState

VALID_DETAILS = "今天複習分數的加減法，學生對通分的概念已經相當熟練，能獨立完成練習題。"


@pytest.fixture
def test_engine(tmp_path):
    """Engine over a per-test SQLite file."""
    return create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def session_state():
    return SessionState()


@pytest.fixture
def capture_handle():
    handle = Mock()
    handle.read_frame = Mock(return_value=Image.new("RGB", (4, 4)))
    handle.release = Mock()
    return handle


@pytest.fixture
def capture_device(capture_handle):
    device = Mock()
    device.acquire = Mock(return_value=capture_handle)
    return device


@pytest.fixture
def workflow(mock_llm_client, capture_device):
    return EnrichmentWorkflow(llm_client=mock_llm_client, capture_device=capture_device)


@pytest.fixture
def anonymous_client(test_engine, session_factory, session_state, workflow, tmp_path):
    """TestClient with storage and singletons overridden; nobody logged in."""
    from tutor_reports.main import app
    from tutor_reports.config import Settings, get_settings
    from tutor_reports.database import get_db
    from tutor_reports.factories.service_factories import (
        get_enrichment_workflow,
        get_session_state,
    )

    async def create_tables():
        async with test_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    settings = Settings(
        _env_file=None,
        export_dir=str(tmp_path / "exports"),
        capture_device_dir=str(tmp_path / "capture"),
        gemini_api_key="test-key",
    )

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_session_state] = lambda: session_state
    app.dependency_overrides[get_enrichment_workflow] = lambda: workflow

    with ExitStack() as stack:
        stack.enter_context(patch("tutor_reports.main.init_db", new=create_tables))
        stack.enter_context(patch("tutor_reports.main.engine", new=test_engine))
        stack.enter_context(patch("tutor_reports.main.AsyncSessionLocal", new=session_factory))
        stack.enter_context(patch("tutor_reports.main.get_session_state", return_value=session_state))
        stack.enter_context(patch("tutor_reports.main.get_enrichment_workflow", return_value=workflow))
        with TestClient(app, raise_server_exceptions=False) as test_client:
            yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def login(anonymous_client):
    """Log in through the API; returns a callable taking the display name."""

    def _login(name: str):
        response = anonymous_client.post("/api/v1/session/login", json={"name": name})
        assert response.status_code == 200
        return response.json()

    return _login


@pytest.fixture
def client(anonymous_client, login):
    """TestClient logged in as an ordinary tutor."""
    login("王老師")
    return anonymous_client


@pytest.fixture
def report_payload():
    """Factory for report draft payloads in the API's camelCase shape."""

    def _make(**overrides):
        payload = {
            "date": "2024-03-05",
            "category": "輔導",
            "studentName": "小明",
            "subject": "數學",
            "topics": ["觀念講解"],
            "details": VALID_DETAILS,
        }
        payload.update(overrides)
        return payload

    return _make
