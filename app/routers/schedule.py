"""
Student schedule router.

POST /schedule/generate — organize a student's events into a daily schedule
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from app.core.config import settings
from app.core.deps import get_llm
from app.schemas.schedule import GenerateScheduleRequest, GenerateScheduleResponse
from app.services.llm_client import TextGenerator
from app.services.student_schedule import (
    generate_schedule,
    load_student_data,
    render_schedule,
    save_schedule,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/schedule", tags=["schedule"])


@router.post(
    "/generate",
    response_model=GenerateScheduleResponse,
    summary="Generate a student's daily schedule with the LLM",
    responses={
        422: {"description": "Student data missing or malformed."},
        502: {"description": "LLM call failed or its reply was not a schedule."},
        503: {"description": "LLM_API_KEY not configured."},
    },
)
async def generate(
    payload: Optional[GenerateScheduleRequest] = None,
    llm: TextGenerator = Depends(get_llm),
):
    """
    Use the inline `student_data`, or load `STUDENT_DATA_PATH` when it is
    omitted. The result is written to `SCHEDULE_OUTPUT_PATH` when set.
    """
    data = payload.student_data if payload and payload.student_data else None
    if data is None:
        data = load_student_data(settings.STUDENT_DATA_PATH)

    schedule = await generate_schedule(data, llm)

    saved_to = None
    if settings.SCHEDULE_OUTPUT_PATH:
        try:
            saved_to = str(save_schedule(schedule, settings.SCHEDULE_OUTPUT_PATH))
        except OSError as exc:
            # The schedule is still returned; only the file copy is lost.
            logger.error("Error saving schedule file: %s", exc)

    return GenerateScheduleResponse(
        student=data.student.name,
        schedule=schedule,
        rendered=render_schedule(schedule),
        saved_to=saved_to,
    )
