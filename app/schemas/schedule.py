"""
Student schedule schemas.

The same models validate `student-data.json` on disk and the request body
of POST /schedule/generate.

POST /schedule/generate → GenerateScheduleRequest → GenerateScheduleResponse
"""
from typing import Annotated, Optional

from pydantic import BaseModel, Field

NonEmpty = Annotated[str, Field(min_length=1)]


class Student(BaseModel):
    name: NonEmpty
    preferences: NonEmpty


class StudentEvent(BaseModel):
    description: NonEmpty
    category: str
    duration: str = Field(examples=["1 hour", "30 minutes"])


class StudentData(BaseModel):
    """Student info plus the events to place in today's schedule."""
    student: Student
    events: list[StudentEvent]


class ScheduledItem(BaseModel):
    time: str = ""
    activity: str = ""
    category: str = ""
    duration: str = ""


class Schedule(BaseModel):
    morning: list[ScheduledItem] = Field(default_factory=list)
    afternoon: list[ScheduledItem] = Field(default_factory=list)
    evening: list[ScheduledItem] = Field(default_factory=list)


class GenerateScheduleRequest(BaseModel):
    student_data: Optional[StudentData] = Field(
        default=None,
        description="Inline student data. Omit to load STUDENT_DATA_PATH.",
    )


class GenerateScheduleResponse(BaseModel):
    student: str
    schedule: Schedule
    rendered: str = Field(description="Human-readable schedule text.")
    saved_to: Optional[str] = Field(
        default=None, description="File the schedule was written to, if any."
    )
