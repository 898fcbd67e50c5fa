"""
Day planner schemas. Slots are half-hours from midnight (0..47).
"""
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

Slot = Annotated[int, Field(ge=0, le=47, examples=[13])]


class AddActivityRequest(BaseModel):
    title: Annotated[str, Field(min_length=1, max_length=200, examples=["Morning run"])]
    duration: Annotated[int, Field(ge=1, le=48, description="Half-hour slots.", examples=[2])]


class AssignActivityRequest(BaseModel):
    start_time: Slot


class ActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: str
    duration: int
    start_time: Optional[int] = None
    start_label: Optional[str] = Field(default=None, examples=["6:30 AM"])


class ActivityListResponse(BaseModel):
    total: int
    items: list[ActivityResponse]


class SlotResponse(BaseModel):
    slot: int
    label: str
    activities: list[str]


class PlannerScheduleResponse(BaseModel):
    slots: list[SlotResponse] = Field(description="Occupied slots only, in order.")
    unassigned: list[str]
    rendered: str


class LLMAssignResponse(BaseModel):
    applied: list[str]
    unassigned: list[str]
