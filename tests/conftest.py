"""
Shared pytest fixtures.

Each test gets a fresh in-memory store and planner, and a scripted fake
LLM in place of the real client, so no API key or network is required.
"""
from datetime import date

import pytest
from fastapi.testclient import TestClient

from app.core.deps import get_llm, get_planner, get_store
from app.main import app
from app.services.competition import CompetitionStore
from app.services.day_planner import DayPlanner

# Fixed "today" for store tests; competitions in tests are in May 2025.
TODAY = date(2025, 6, 1)


class FakeLLM:
    """Returns queued replies in order and records every prompt."""

    def __init__(self, *replies: str):
        self.replies = list(replies)
        self.prompts: list[str] = []

    def queue(self, *replies: str) -> None:
        self.replies.extend(replies)

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.replies:
            raise AssertionError("FakeLLM has no reply queued")
        return self.replies.pop(0)


@pytest.fixture()
def store():
    return CompetitionStore(clock=lambda: TODAY)


@pytest.fixture()
def planner():
    return DayPlanner()


@pytest.fixture()
def fake_llm():
    return FakeLLM()


@pytest.fixture()
def client(store, planner, fake_llm):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_planner] = lambda: planner
    app.dependency_overrides[get_llm] = lambda: fake_llm
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
