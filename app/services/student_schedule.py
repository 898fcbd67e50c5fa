"""
Student schedule: load a student's events, let the LLM organize them into
morning / afternoon / evening, then render or save the result.

Public API
----------
load_student_data(path)                 -> StudentData   (raises StudentDataError)
parse_schedule(text)                    -> Schedule      (raises LLMResponseParseError)
render_schedule(schedule)               -> str
save_schedule(schedule, path)           -> Path
generate_schedule(data, llm)            -> Schedule      (async)
"""
from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from app.core.errors import LLMResponseParseError, StudentDataError
from app.schemas.schedule import Schedule, ScheduledItem, StudentData
from app.services.llm_client import TextGenerator
from app.services.prompts import build_schedule_prompt
from app.services.summary_validator import extract_json_block

logger = logging.getLogger(__name__)

_PERIODS = [
    ("morning",   "🌅 MORNING (6:00 AM - 12:00 PM)"),
    ("afternoon", "☀️  AFTERNOON (12:00 PM - 6:00 PM)"),
    ("evening",   "🌙 EVENING (6:00 PM - 11:00 PM)"),
]


def load_student_data(path: str | Path) -> StudentData:
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise StudentDataError(f"Could not read student data: {exc}", path=str(path)) from exc
    try:
        data = StudentData.model_validate_json(raw)
    except ValidationError as exc:
        raise StudentDataError(f"Invalid student data structure: {exc}", path=str(path)) from exc
    logger.info("Loaded %d events for student %s", len(data.events), data.student.name)
    return data


def parse_schedule(text: str) -> Schedule:
    block = extract_json_block(text)
    try:
        return Schedule.model_validate(json.loads(block))
    except (ValueError, ValidationError) as exc:
        raise LLMResponseParseError(f"Error parsing schedule: {exc}", raw=text) from exc


def _render_period(title: str, items: list[ScheduledItem]) -> list[str]:
    lines = [title, "-" * len(title)]
    for item in items:
        lines.append(f"⏰ {item.time} - {item.activity}")
        lines.append(f"   Category: {item.category} | Duration: {item.duration}")
        lines.append("")
    return lines


def render_schedule(schedule: Schedule) -> str:
    lines = ["📅 DAILY SCHEDULE", "==================", ""]
    for attr, title in _PERIODS:
        lines += _render_period(title, getattr(schedule, attr))
    return "\n".join(lines).rstrip() + "\n"


def save_schedule(schedule: Schedule, path: str | Path) -> Path:
    path = Path(path)
    path.write_text(schedule.model_dump_json(indent=2), encoding="utf-8")
    logger.info("Schedule saved to %s", path)
    return path


async def generate_schedule(data: StudentData, llm: TextGenerator) -> Schedule:
    logger.info("Generating schedule for %s", data.student.name)
    text = await llm.complete(build_schedule_prompt(data))
    return parse_schedule(text)
