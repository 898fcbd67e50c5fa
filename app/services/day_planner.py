"""
Day planner: activities placed into 48 half-hour slots of a single day.

Nothing here decides *where* an activity should go. Slots come from the
user or from the LLM (`apply_llm_assignments`) and are only stored.
"""
from __future__ import annotations

import json
import logging
from typing import Optional

from app.core.errors import (
    ActivityNotFoundError,
    DuplicateActivityError,
    InvalidTimeSlotError,
    LLMResponseParseError,
)
from app.models.planner import SLOTS_PER_DAY, Activity, Assignment
from app.services.llm_client import TextGenerator
from app.services.prompts import build_assignment_prompt, format_duration
from app.services.summary_validator import extract_json_block

logger = logging.getLogger(__name__)


def format_time_slot(slot: int) -> str:
    """Slot number to clock time: 0 -> '12:00 AM', 13 -> '6:30 AM'."""
    hours, half = divmod(slot, 2)
    minutes = half * 30
    period = "PM" if hours >= 12 else "AM"
    display = 12 if hours == 0 else hours - 12 if hours > 12 else hours
    return f"{display}:{minutes:02d} {period}"


def _check_slot(slot: int) -> None:
    if not 0 <= slot < SLOTS_PER_DAY:
        raise InvalidTimeSlotError(slot, SLOTS_PER_DAY - 1)


class DayPlanner:
    def __init__(self) -> None:
        self._activities: list[Activity] = []
        self._assignments: list[Assignment] = []

    # --- activities ---------------------------------------------------------

    def add_activity(self, title: str, duration: int) -> Activity:
        if self.find(title) is not None:
            raise DuplicateActivityError(title)
        activity = Activity(title=title, duration=duration)
        self._activities.append(activity)
        return activity

    def find(self, title: str) -> Optional[Activity]:
        for activity in self._activities:
            if activity.title == title:
                return activity
        return None

    def get(self, title: str) -> Activity:
        activity = self.find(title)
        if activity is None:
            raise ActivityNotFoundError(title)
        return activity

    def remove_activity(self, activity: Activity) -> None:
        self._assignments = [a for a in self._assignments if a.activity is not activity]
        self._activities = [a for a in self._activities if a is not activity]

    def activities(self) -> list[Activity]:
        return list(self._activities)

    def unassigned(self) -> list[Activity]:
        return [a for a in self._activities if a.start_time is None]

    # --- assignments --------------------------------------------------------

    def assign_activity(self, activity: Activity, start_time: int) -> Assignment:
        _check_slot(start_time)
        self.unassign_activity(activity)
        assignment = Assignment(activity=activity, start_time=start_time)
        self._assignments.append(assignment)
        activity.start_time = start_time
        return assignment

    def unassign_activity(self, activity: Activity) -> None:
        self._assignments = [a for a in self._assignments if a.activity is not activity]
        activity.start_time = None

    def assignments(self) -> list[Assignment]:
        return list(self._assignments)

    # --- views --------------------------------------------------------------

    def query_schedule(self) -> dict[int, list[Activity]]:
        """Every slot mapped to the activities occupying it."""
        schedule: dict[int, list[Activity]] = {slot: [] for slot in range(SLOTS_PER_DAY)}
        for assignment in self._assignments:
            for offset in range(assignment.activity.duration):
                slot = assignment.start_time + offset
                if slot < SLOTS_PER_DAY:
                    schedule[slot].append(assignment.activity)
        return schedule

    def render_schedule(self) -> str:
        lines = ["📅 Daily Schedule", "=================="]
        ordered = sorted(self._assignments, key=lambda a: a.start_time)
        for assignment in ordered:
            activity = assignment.activity
            lines.append(
                f"{format_time_slot(assignment.start_time)} - {activity.title} "
                f"({format_duration(activity.duration)})"
            )
        if not ordered:
            lines.append("No activities scheduled yet.")

        lines += ["", "📋 Unassigned Activities", "========================"]
        unassigned = self.unassigned()
        for activity in unassigned:
            lines.append(f"- {activity.title} ({format_duration(activity.duration)})")
        if not unassigned:
            lines.append("All activities are assigned!")
        return "\n".join(lines)


def apply_llm_assignments(
    planner: DayPlanner,
    response_text: str,
    candidates: list[Activity],
) -> list[str]:
    """
    Apply `{"assignments": [{"title", "startTime"}]}` from a model reply.

    Only titles among `candidates` with an integer slot in range are
    applied; anything else is logged and skipped. Returns applied titles.
    """
    try:
        payload = json.loads(extract_json_block(response_text))
    except ValueError as exc:
        raise LLMResponseParseError(f"Invalid JSON in response: {exc}", raw=response_text) from exc

    items = payload.get("assignments") if isinstance(payload, dict) else None
    if not isinstance(items, list):
        raise LLMResponseParseError("Invalid response format", raw=response_text)

    by_title = {a.title: a for a in candidates}
    applied: list[str] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        title = item.get("title")
        activity = by_title.get(title) if isinstance(title, str) else None
        start = item.get("startTime")
        valid_slot = (
            isinstance(start, int)
            and not isinstance(start, bool)
            and 0 <= start < SLOTS_PER_DAY
        )
        if activity is None or not valid_slot:
            logger.warning(
                "Skipping LLM assignment %r at %r: unknown activity or invalid slot",
                title, start,
            )
            continue
        planner.assign_activity(activity, start)
        applied.append(activity.title)
        logger.info("Assigned %r to %s", activity.title, format_time_slot(start))
    return applied


async def request_llm_assignments(planner: DayPlanner, llm: TextGenerator) -> list[str]:
    """Ask the model to place every unassigned activity."""
    pending = planner.unassigned()
    if not pending:
        logger.info("All activities are already assigned")
        return []
    logger.info("Requesting slots for %d unassigned activities", len(pending))
    text = await llm.complete(build_assignment_prompt(pending))
    return apply_llm_assignments(planner, text, pending)
