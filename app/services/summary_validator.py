"""
Summary validator: checks an LLM-written competition summary against the
competition's own stats before anything is stored or shown.

The model is treated as an untrusted generator. Totals, the winner and
the dates mentioned in the daily highlights are all recomputed from
`competition.daily_stats` and compared with what the model claims.

Checks
------
  1. JSON parses to an object              -> else immediate failure
  2. userTotal / challengerTotal numeric   -> else immediate failure
  3. winner is user, challenger or a draw  -> else immediate failure
  4. totals match exactly                  \
  5. winner matches the totals              |  collected together,
  6. no highlight date outside the window   |  all reported at once
  7. every date of the window is mentioned /

Public API
----------
extract_json_block(text)                  -> str   (raises LLMResponseParseError)
validate_summary(candidate, competition)  -> ValidationResult
"""
from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Optional

from app.core.errors import LLMResponseParseError
from app.models.competition import Competition
from app.services.competition import DRAW

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DRAW_SYNONYMS = frozenset({"draw", "tie", "tied"})

_JSON_BLOCK_RE = re.compile(r"\{.*\}", re.DOTALL)
_ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")

SUCCESS_MESSAGE = "totals, winner, and dates match"


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------

@dataclass
class ValidationResult:
    valid: bool
    expected_user_total: int
    expected_challenger_total: int
    message: str


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def extract_json_block(text: str) -> str:
    """
    Return the span from the first '{' to the last '}' of a model reply.
    Models often wrap JSON in prose or markdown fences.
    """
    match = _JSON_BLOCK_RE.search(text or "")
    if not match:
        raise LLMResponseParseError("No JSON found in response", raw=text)
    return match.group(0)


def coerce_number(value: Any) -> Optional[float]:
    """Accept ints, floats and numeric strings. Booleans are not totals."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def format_number(number: float) -> str:
    return str(int(number)) if float(number).is_integer() else str(number)


def _normalize(name: str) -> str:
    return name.strip().casefold()


def _expected_totals(competition: Competition) -> tuple[int, int]:
    user_total = 0
    challenger_total = 0
    for stat in competition.daily_stats:
        if stat.user == competition.user:
            user_total += stat.daily_score
        elif stat.user == competition.challenger:
            challenger_total += stat.daily_score
    return user_total, challenger_total


def _expected_winner(competition: Competition, user_total: int, challenger_total: int) -> str:
    if user_total > challenger_total:
        return competition.user
    if challenger_total > user_total:
        return competition.challenger
    return DRAW


def extract_highlight_dates(highlights: Any) -> list[date]:
    """Sorted, de-duplicated calendar dates mentioned in string highlights."""
    if not isinstance(highlights, list):
        return []
    found: set[date] = set()
    for item in highlights:
        if not isinstance(item, str):
            continue
        for token in _ISO_DATE_RE.findall(item):
            try:
                found.add(date.fromisoformat(token))
            except ValueError:
                continue  # e.g. 2025-13-45
    return sorted(found)


def date_range(start: date, end: date) -> list[date]:
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def _iso_list(days: list[date]) -> str:
    return json.dumps([d.isoformat() for d in days])


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def validate_summary(candidate: str, competition: Competition) -> ValidationResult:
    try:
        parsed = json.loads(candidate)
    except (TypeError, ValueError) as exc:
        return ValidationResult(False, 0, 0, f"could not parse summary JSON: {exc}")
    if not isinstance(parsed, dict):
        return ValidationResult(
            False, 0, 0, "could not parse summary JSON: top-level value is not an object"
        )

    reported_user = coerce_number(parsed.get("userTotal"))
    reported_challenger = coerce_number(parsed.get("challengerTotal"))
    if reported_user is None or reported_challenger is None:
        return ValidationResult(False, 0, 0, "reported totals are not numbers")

    expected_user, expected_challenger = _expected_totals(competition)
    expected_winner = _expected_winner(competition, expected_user, expected_challenger)

    raw_winner = parsed.get("winner")
    reported_winner = "" if raw_winner is None else str(raw_winner).strip()
    normalized = _normalize(reported_winner)
    reported_is_draw = normalized in DRAW_SYNONYMS

    known = (
        reported_is_draw
        or normalized == _normalize(competition.user)
        or normalized == _normalize(competition.challenger)
    )
    if not known:
        return ValidationResult(
            False,
            expected_user,
            expected_challenger,
            f'reported winner "{reported_winner}" is not one of '
            f"[{competition.user}, {competition.challenger}, {DRAW}]",
        )

    if reported_is_draw:
        winner_matches = expected_winner == DRAW
    else:
        winner_matches = normalized == _normalize(expected_winner)
    totals_match = (
        reported_user == expected_user and reported_challenger == expected_challenger
    )

    reported_dates = extract_highlight_dates(parsed.get("dailyHighlights"))
    window = date_range(competition.start_date, competition.end_date)
    start, end = competition.start_date.isoformat(), competition.end_date.isoformat()

    out_of_range = [d for d in reported_dates if not competition.covers(d)]
    reported_set = set(reported_dates)
    missing = [d for d in window if d not in reported_set]

    errors: list[str] = []
    if out_of_range:
        errors.append(
            f"date out of range: LLM reported dates outside {start}..{end}: "
            f"{_iso_list(out_of_range)}"
        )
    if missing:
        errors.append(
            f"missing dates: LLM did not include these dates from {start}..{end}: "
            f"{_iso_list(missing)}"
        )
    if not totals_match:
        errors.append(
            f"expected totals {expected_user}/{expected_challenger} but LLM reported "
            f"{format_number(reported_user)}/{format_number(reported_challenger)}"
        )
    if not winner_matches:
        errors.append(
            f'expected winner "{expected_winner}" but LLM reported "{reported_winner}"'
        )

    return ValidationResult(
        valid=not errors,
        expected_user_total=expected_user,
        expected_challenger_total=expected_challenger,
        message="; ".join(errors) if errors else SUCCESS_MESSAGE,
    )
