"""Shared pytest fixtures."""

# Clear settings cache before any imports to prevent stale values
from tutor_reports.config import get_settings

get_settings.cache_clear()

import datetime as dt
import io
from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from tutor_reports import models  # noqa: F401
from tutor_reports.database import Base
from tutor_reports.schemas.reports import Report
from tutor_reports.vocabulary import Category, Subject


@pytest.fixture
async def db_engine():
    """In-memory SQLite engine with the schema created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Session bound to the in-memory engine."""
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_report():
    """Factory fixture for Report objects with sensible defaults."""

    def _make(**overrides) -> Report:
        fields = {
            "id": "",
            "tutor_name": "王老師",
            "date": dt.date(2024, 3, 5),
            "category": Category.TUTORING,
            "student_name": "小明",
            "subject": Subject.MATH,
            "topics": ["觀念講解"],
            "details": "今天複習分數的加減法，學生對通分的概念已經相當熟練，能獨立完成練習題。",
            "timestamp": 1709618829000,
        }
        fields.update(overrides)
        return Report(**fields)

    return _make


@pytest.fixture
def mock_llm_client():
    """Create a mock LLM client."""
    client = AsyncMock()
    client.provider_name = "mock"
    client.model = "mock-model"
    client.analyze_image = AsyncMock(return_value="第 3 題計算錯誤，建議加強分數通分練習。")
    return client


@pytest.fixture
def png_bytes() -> bytes:
    """A small valid PNG image."""
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()
