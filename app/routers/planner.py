"""
Day planner router.

POST   /planner/activities                   — add an activity
GET    /planner/activities                   — list activities
DELETE /planner/activities/{title}           — remove an activity and its assignment
POST   /planner/activities/{title}/assign    — place an activity at a slot
POST   /planner/activities/{title}/unassign  — clear an activity's slot
GET    /planner/schedule                     — occupied slots + rendered text
POST   /planner/llm-assign                   — let the LLM place unassigned activities
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from app.core.deps import get_llm, get_planner
from app.models.planner import Activity
from app.schemas.planner import (
    ActivityListResponse,
    ActivityResponse,
    AddActivityRequest,
    AssignActivityRequest,
    LLMAssignResponse,
    PlannerScheduleResponse,
    SlotResponse,
)
from app.services.day_planner import DayPlanner, format_time_slot, request_llm_assignments
from app.services.llm_client import TextGenerator

router = APIRouter(prefix="/planner", tags=["planner"])


def _activity_to_response(a: Activity) -> ActivityResponse:
    return ActivityResponse(
        title=a.title,
        duration=a.duration,
        start_time=a.start_time,
        start_label=format_time_slot(a.start_time) if a.start_time is not None else None,
    )


@router.post(
    "/activities",
    response_model=ActivityResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add an activity",
    responses={409: {"description": "An activity with this title exists."}},
)
def add_activity(payload: AddActivityRequest, planner: DayPlanner = Depends(get_planner)):
    return _activity_to_response(planner.add_activity(payload.title, payload.duration))


@router.get("/activities", response_model=ActivityListResponse, summary="List activities")
def list_activities(planner: DayPlanner = Depends(get_planner)):
    items = [_activity_to_response(a) for a in planner.activities()]
    return ActivityListResponse(total=len(items), items=items)


@router.delete(
    "/activities/{title}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove an activity",
    responses={404: {"description": "Unknown activity."}},
)
def remove_activity(title: str, planner: DayPlanner = Depends(get_planner)):
    planner.remove_activity(planner.get(title))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/activities/{title}/assign",
    response_model=ActivityResponse,
    summary="Assign an activity to a start slot",
    responses={404: {"description": "Unknown activity."}},
)
def assign_activity(
    title: str,
    payload: AssignActivityRequest,
    planner: DayPlanner = Depends(get_planner),
):
    """Replaces any previous slot of the activity. Overlaps are allowed."""
    activity = planner.get(title)
    planner.assign_activity(activity, payload.start_time)
    return _activity_to_response(activity)


@router.post(
    "/activities/{title}/unassign",
    response_model=ActivityResponse,
    summary="Clear an activity's slot",
    responses={404: {"description": "Unknown activity."}},
)
def unassign_activity(title: str, planner: DayPlanner = Depends(get_planner)):
    activity = planner.get(title)
    planner.unassign_activity(activity)
    return _activity_to_response(activity)


@router.get("/schedule", response_model=PlannerScheduleResponse, summary="Current day schedule")
def planner_schedule(planner: DayPlanner = Depends(get_planner)):
    slots = [
        SlotResponse(slot=slot, label=format_time_slot(slot), activities=[a.title for a in acts])
        for slot, acts in planner.query_schedule().items()
        if acts
    ]
    return PlannerScheduleResponse(
        slots=slots,
        unassigned=[a.title for a in planner.unassigned()],
        rendered=planner.render_schedule(),
    )


@router.post(
    "/llm-assign",
    response_model=LLMAssignResponse,
    summary="Let the LLM place unassigned activities",
    responses={
        502: {"description": "LLM call failed or its reply had no usable JSON."},
        503: {"description": "LLM_API_KEY not configured."},
    },
)
async def llm_assign(
    planner: DayPlanner = Depends(get_planner),
    llm: TextGenerator = Depends(get_llm),
):
    """
    Send every unassigned activity to the LLM and store the slots it
    proposes. Unknown titles and invalid slots in the reply are skipped.
    """
    applied = await request_llm_assignments(planner, llm)
    return LLMAssignResponse(
        applied=applied,
        unassigned=[a.title for a in planner.unassigned()],
    )
