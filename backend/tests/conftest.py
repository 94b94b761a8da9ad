"""
PromptMaster Backend - Test Configuration (conftest.py)
=======================================================

Shared pytest fixtures. No test touches the network or a real database:
Gemini is an AsyncMock, the translation provider runs on httpx.MockTransport
and the session is an AsyncMock.

Fixtures:
    mock_db_session:     AsyncMock standing in for AsyncSession
    fake_llm:            AsyncMock with the LLMService surface
    recording_translator: TranslationService double that records every call
    make_prompt_record:  factory for PromptRecord rows
    owner_scoped_execute: session.execute stand-in that honours the owner filter
    test_client:         httpx AsyncClient bound to the FastAPI app (as user-a)
"""

import os

# Must run before anything imports promptmaster.config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["GEMINI_API_KEY"] = "test-key-not-real"
os.environ["TRANSLATION_API_KEY"] = "test-translation-key"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "10000"
os.environ["AI_RATE_LIMIT_REQUESTS"] = "1000"

import asyncio
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from promptmaster.models.prompt import PromptRecord
from promptmaster.services.llm_base import LLMService


class RecordingTranslator:
    """
    Deterministic TranslationService double.

    Returns "[<target>] <text>" and records (text, source, target) for every
    call that would have reached a provider. Optional per-text delays make
    calls take measurable, unequal time for concurrency tests.
    """

    def __init__(self, delays: Optional[Dict[str, float]] = None):
        self.delays = delays or {}
        self.calls: List[Tuple[str, str, str]] = []

    async def translate(self, text: str, source_language, target_language) -> str:
        source = getattr(source_language, "value", source_language)
        target = getattr(target_language, "value", target_language)
        if source == target:
            return text
        self.calls.append((text, source, target))
        delay = self.delays.get(text, 0.0)
        if delay:
            await asyncio.sleep(delay)
        return f"[{target}] {text}"

    async def aclose(self) -> None:
        return None


@pytest.fixture
def mock_db_session():
    """
    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = record
        result = await prompt_service.get_prompt(mock_db_session, "user-a", record.id)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def fake_llm():
    return AsyncMock(spec=LLMService)


@pytest.fixture
def recording_translator():
    return RecordingTranslator()


@pytest.fixture
def slow_translator():
    """Translating "answer" takes 0.3s, "critique" takes 0.1s."""
    return RecordingTranslator(delays={"answer": 0.3, "critique": 0.1})


@pytest.fixture
def make_prompt_record():
    def _make(
        english_output: str = "Write a 300-word summary of photosynthesis for a 10th grader.",
        english_critique: Optional[str] = "The original prompt had no audience or length.",
        localized_output: Optional[str] = None,
        localized_critique: Optional[str] = None,
        source_language: str = "en",
        target_language: str = "en",
        mode: str = "improve",
        is_favorite: bool = False,
        category: Optional[str] = None,
        user_id: str = "user-a",
    ) -> PromptRecord:
        return PromptRecord(
            id=uuid4(),
            user_id=user_id,
            input_text="explain photosynthesis",
            english_input=None,
            english_output=english_output,
            english_critique=english_critique,
            localized_output=localized_output,
            localized_critique=localized_critique,
            source_language=source_language,
            target_language=target_language,
            mode=mode,
            category=category,
            is_favorite=is_favorite,
            created_at=datetime.now(timezone.utc),
        )

    return _make


@pytest.fixture
def owner_scoped_execute():
    """
    Builds a stand-in for session.execute on single-prompt lookups.

    A record is returned only when both its id and its owner appear among
    the statement's bound parameters, which is what the WHERE clause
    enforces in the database.

    Usage:
        mock_db_session.execute.side_effect = owner_scoped_execute([record])
    """
    def _build(records):
        async def execute(statement):
            values = set(statement.compile().params.values())
            match = next((r for r in records if r.id in values and r.user_id in values), None)
            result = MagicMock()
            result.scalar_one_or_none.return_value = match
            return result

        return execute

    return _build


@pytest_asyncio.fixture
async def test_client(mock_db_session):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    get_db_session is overridden with mock_db_session, so route tests only
    need to patch the service they exercise. Requests carry X-User-ID:
    user-a unless a test overrides the header.
    """
    from promptmaster.database import get_db_session
    from promptmaster.main import app

    async def _override_session():
        yield mock_db_session

    app.dependency_overrides[get_db_session] = _override_session
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"X-User-ID": "user-a"},
    ) as client:
        yield client
    app.dependency_overrides.clear()
