"""
FastAPI dependencies for the in-memory stores and the LLM client.

The store and planner live on `app.state` (created in app.main); tests
swap them out through `app.dependency_overrides`.
"""
from fastapi import Request

from app.services.competition import CompetitionStore
from app.services.day_planner import DayPlanner
from app.services.llm_client import LLMClient, TextGenerator


def get_store(request: Request) -> CompetitionStore:
    return request.app.state.competition_store


def get_planner(request: Request) -> DayPlanner:
    return request.app.state.day_planner


def get_llm() -> TextGenerator:
    """Raises LLMNotConfiguredError (503) when no API key is set."""
    return LLMClient()
