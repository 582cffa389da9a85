# tests/conftest.py
"""
Shared pytest fixtures for CodeMentor tests.

Provides:
- A fake generation client that records every prompt
- Settings with and without a Gemini key
- An in-memory SQLite session factory (StaticPool, tables created)
- TestClient factories wired to the fakes
"""
import json
from typing import Any, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.pool import StaticPool

from database.db import build_engine, build_session_factory, create_tables, session_scope
from database.models import PracticeProblem
from main import create_app
from utils.config import Settings


# ═══════════════════════════════════════════════════════
# FAKES
# ═══════════════════════════════════════════════════════

class FakeGeminiClient:
    """Stands in for GeminiClient. Returns `reply` or raises `error`."""

    def __init__(self, reply: str = "", error: Optional[Exception] = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def generate_text(self, prompt: str, temperature: float, max_output_tokens: int) -> str:
        self.calls.append({
            "prompt":            prompt,
            "temperature":       temperature,
            "max_output_tokens": max_output_tokens,
        })
        if self.error is not None:
            raise self.error
        return self.reply


VALID_PROBLEM: dict[str, Any] = {
    "title": "Sum of a list",
    "description": "Return the sum of the integers in a list.",
    "starterCode": "def total(nums):\n    pass",
    "solution": "def total(nums):\n    return sum(nums)",
    "testCases": [
        {"input": "[1, 2, 3]", "output": "6"},
        {"input": "[]", "output": "0"},
    ],
    "hints": ["Start with a running total of 0", "  "],
    "concepts": ["lists", "iteration", "Lists"],
}


# ═══════════════════════════════════════════════════════
# FIXTURES - configuration and fakes
# ═══════════════════════════════════════════════════════

@pytest.fixture
def settings() -> Settings:
    return Settings(gemini_api_key="test-key", database_url="sqlite://")


@pytest.fixture
def no_key_settings() -> Settings:
    return Settings(gemini_api_key=None, database_url="sqlite://")


@pytest.fixture
def fake_client() -> FakeGeminiClient:
    return FakeGeminiClient()


@pytest.fixture
def make_fake():
    return FakeGeminiClient


@pytest.fixture
def valid_problem() -> dict[str, Any]:
    return json.loads(json.dumps(VALID_PROBLEM))


@pytest.fixture
def valid_problem_reply(valid_problem) -> str:
    """Model reply with prose and a markdown fence around the JSON object."""
    return (
        "Sure! Here is a beginner problem:\n\n```json\n"
        + json.dumps(valid_problem, indent=2)
        + "\n```\nGood luck!"
    )


# ═══════════════════════════════════════════════════════
# FIXTURES - database
# ═══════════════════════════════════════════════════════

@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def problem_count(session_factory):
    """Returns a callable that counts rows in practice_problems."""
    def _count() -> int:
        with session_scope(session_factory) as db:
            return db.scalar(select(func.count()).select_from(PracticeProblem))
    return _count


# ═══════════════════════════════════════════════════════
# FIXTURES - HTTP
# ═══════════════════════════════════════════════════════

@pytest.fixture
def make_api(session_factory):
    """Builds a TestClient for the given settings and fake client."""
    def _make(settings: Settings, client: FakeGeminiClient, **kwargs) -> TestClient:
        app = create_app(settings=settings, client=client, session_factory=session_factory)
        return TestClient(app, **kwargs)
    return _make


@pytest.fixture
def api(make_api, settings, fake_client):
    with make_api(settings, fake_client) as client:
        yield client
