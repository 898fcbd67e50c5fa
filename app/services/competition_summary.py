"""
Competition summary: ask the LLM for a narrative, verify it, then store it.

competition.summary is written only after validate_summary() passes.
Every failure (API error, no JSON, failed checks) raises and leaves the
previous summary untouched.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field

from app.core.errors import LLMResponseParseError, SummaryValidationError
from app.services.competition import CompetitionStore
from app.services.llm_client import TextGenerator
from app.services.prompts import build_summary_prompt
from app.services.summary_validator import (
    ValidationResult,
    coerce_number,
    extract_json_block,
    format_number,
    validate_summary,
)

logger = logging.getLogger(__name__)


@dataclass
class CompetitionSummary:
    summary_title: str
    winner: str
    user_total: float
    challenger_total: float
    daily_highlights: list[str] = field(default_factory=list)
    motivation: str = ""

    @classmethod
    def from_payload(cls, payload: dict) -> "CompetitionSummary":
        highlights = payload.get("dailyHighlights")
        return cls(
            summary_title=str(payload.get("summaryTitle") or ""),
            winner=str(payload.get("winner") or ""),
            user_total=coerce_number(payload.get("userTotal")),
            challenger_total=coerce_number(payload.get("challengerTotal")),
            daily_highlights=[str(h) for h in highlights] if isinstance(highlights, list) else [],
            motivation=str(payload.get("motivation") or ""),
        )

    def render(self) -> str:
        lines = [
            f"🏆 {self.summary_title}",
            "------------------------------------",
            f"Winner: {self.winner}",
            f"Scores — {format_number(self.user_total)} vs {format_number(self.challenger_total)}",
            "",
            "📅 Daily Highlights:",
            *(f"- {line}" for line in self.daily_highlights),
            "",
            f"💬 Motivation: {self.motivation}",
        ]
        return "\n".join(lines)


def check_candidate(store: CompetitionStore, competition_id: int, text: str) -> ValidationResult:
    """
    Validate caller-supplied model text (prose around the JSON is allowed).

    The text comes from the caller, not from the LLM, so a missing JSON
    block is reported as a failed validation rather than raised.
    """
    competition = store.get(competition_id)
    try:
        block = extract_json_block(text)
    except LLMResponseParseError as exc:
        return ValidationResult(False, 0, 0, f"could not parse summary JSON: {exc.message}")
    return validate_summary(block, competition)


async def summarize_competition(
    store: CompetitionStore,
    competition_id: int,
    llm: TextGenerator,
) -> CompetitionSummary:
    competition = store.get(competition_id)
    logger.info("Competition %d: generating summary", competition.id)

    text = await llm.complete(build_summary_prompt(competition))
    block = extract_json_block(text)

    result = validate_summary(block, competition)
    if not result.valid:
        logger.warning(
            "Competition %d: LLM output validation failed: %s",
            competition.id, result.message,
        )
        raise SummaryValidationError(
            reason=result.message,
            expected_user_total=result.expected_user_total,
            expected_challenger_total=result.expected_challenger_total,
        )

    summary = CompetitionSummary.from_payload(json.loads(block))
    competition.summary = summary.render()
    logger.info("Competition %d: summary accepted", competition.id)
    return summary
