"""
Tests for the summary flow: prompt -> fake LLM -> validation -> storage.
"""
from __future__ import annotations

import asyncio
import json
from datetime import date

import pytest

from app.core.errors import LLMResponseParseError, SummaryValidationError
from app.services.competition import EventKind
from app.services.competition_summary import (
    CompetitionSummary,
    check_candidate,
    summarize_competition,
)
from app.services.prompts import build_summary_prompt, serialize_stat


def _seed(store):
    c = store.start_competition("Alice", "Bob", date(2025, 5, 5), date(2025, 5, 6))
    store.record_stat("Alice", date(2025, 5, 5), EventKind.BEDTIME, True)
    store.record_stat("Alice", date(2025, 5, 5), EventKind.WAKEUP, True)
    store.record_stat("Bob", date(2025, 5, 6), EventKind.WAKEUP, False)
    return c


def _reply(**overrides) -> str:
    payload = {
        "summaryTitle": "Alice vs Bob Weekly Competition Summary",
        "winner": "Alice",
        "userTotal": 2,
        "challengerTotal": -1,
        "dailyHighlights": [
            "Day 1 (2025-05-05): Alice hit both targets; Bob did not report data.",
            "Day 2 (2025-05-06): Bob missed wake-up; Alice did not report data.",
        ],
        "motivation": "Alice set the pace. Bob, keep logging!",
    }
    payload.update(overrides)
    return "Here is the summary:\n```json\n" + json.dumps(payload) + "\n```"


class TestPrompt:
    def test_prompt_lists_every_stat_and_window(self, store):
        c = _seed(store)
        prompt = build_summary_prompt(c)
        for stat in c.daily_stats:
            assert serialize_stat(stat) in prompt
        assert "between 2025-05-05 and 2025-05-06 (inclusive)" in prompt
        assert "Alice (user) and Bob (challenger)" in prompt

    def test_serialized_stat_shape(self, store):
        c = _seed(store)
        bob = json.loads(serialize_stat(c.daily_stats[1]))
        assert bob == {
            "user": "Bob",
            "date": "2025-05-06",
            "bedtimeSuccess": None,
            "wakeUpSuccess": False,
            "dailyScore": -1,
        }


class TestSummarizeCompetition:
    def test_valid_reply_is_stored(self, store, fake_llm):
        c = _seed(store)
        fake_llm.queue(_reply())
        summary = asyncio.run(summarize_competition(store, c.id, fake_llm))

        assert summary.winner == "Alice"
        assert summary.user_total == 2
        assert len(fake_llm.prompts) == 1
        assert c.summary.startswith("🏆 Alice vs Bob Weekly Competition Summary")
        assert "Winner: Alice" in c.summary
        assert "Scores — 2 vs -1" in c.summary
        assert "- Day 2 (2025-05-06): Bob missed wake-up; Alice did not report data." in c.summary

    def test_invalid_reply_keeps_previous_summary(self, store, fake_llm):
        c = _seed(store)
        c.summary = "previous"
        fake_llm.queue(_reply(challengerTotal=0))
        with pytest.raises(SummaryValidationError) as exc:
            asyncio.run(summarize_competition(store, c.id, fake_llm))
        assert c.summary == "previous"
        assert exc.value.details["expected_challenger_total"] == -1
        assert "expected totals 2/-1 but LLM reported 2/0" in exc.value.message

    def test_reply_without_json(self, store, fake_llm):
        c = _seed(store)
        fake_llm.queue("Sorry, I can't do that.")
        with pytest.raises(LLMResponseParseError):
            asyncio.run(summarize_competition(store, c.id, fake_llm))
        assert c.summary == ""

    def test_check_candidate_does_not_store(self, store):
        c = _seed(store)
        result = check_candidate(store, c.id, _reply())
        assert result.valid
        assert c.summary == ""

    def test_check_candidate_without_json_is_invalid(self, store):
        c = _seed(store)
        result = check_candidate(store, c.id, "Alice won, trust me.")
        assert result.valid is False
        assert result.message == "could not parse summary JSON: No JSON found in response"
        assert c.summary == ""


class TestCompetitionSummary:
    def test_from_payload_tolerates_missing_fields(self):
        s = CompetitionSummary.from_payload({"winner": "Draw", "userTotal": "1", "challengerTotal": 1})
        assert s.summary_title == ""
        assert s.daily_highlights == []
        assert s.user_total == 1.0

    def test_render_layout(self):
        s = CompetitionSummary("Title", "Draw", 1, 1, ["a", "b"], "Go!")
        assert s.render().splitlines() == [
            "🏆 Title",
            "------------------------------------",
            "Winner: Draw",
            "Scores — 1 vs 1",
            "",
            "📅 Daily Highlights:",
            "- a",
            "- b",
            "",
            "💬 Motivation: Go!",
        ]
