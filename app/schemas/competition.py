"""
Competition request / response schemas.

POST /competitions                          → StartCompetitionRequest → CompetitionResponse
POST /competitions/stats                    → RecordStatRequest       → RecordStatResponse
POST /competitions/{id}/end                 → EndCompetitionRequest   → EndCompetitionResponse
POST /competitions/{id}/summary             →                         → SummaryResponse
POST /competitions/{id}/summary/validate    → ValidateSummaryRequest  → ValidationResponse
"""
from datetime import date
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

Participant = Annotated[str, Field(min_length=1, max_length=100, examples=["Alice"])]


class StartCompetitionRequest(BaseModel):
    user: Participant
    challenger: Participant = Field(examples=["Bob"])
    start_date: date = Field(examples=["2025-05-05"])
    end_date: date = Field(description="Inclusive.", examples=["2025-05-09"])


class DailyStatResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user: str
    date: date
    bedtime_success: Optional[bool] = Field(description="null when not reported.")
    wakeup_success: Optional[bool] = Field(description="null when not reported.")
    daily_score: int = Field(description="+1 per hit, -1 per miss. Range -2..2.")


class CompetitionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user: str
    challenger: str
    start_date: date
    end_date: date
    outcome: str
    summary: str
    user_total: int
    challenger_total: int
    daily_stats: list[DailyStatResponse]


class CompetitionListResponse(BaseModel):
    total: int
    items: list[CompetitionResponse]


class RecordStatRequest(BaseModel):
    user: Participant
    date: date
    event: str = Field(description='"bedtime" | "wakeup"', examples=["bedtime"])
    success: bool


class RecordStatResponse(BaseModel):
    competition_id: int
    stat: DailyStatResponse


class EndCompetitionRequest(BaseModel):
    today: Optional[date] = Field(
        default=None,
        description="Evaluate as of this day. Defaults to today (UTC).",
    )


class EndCompetitionResponse(BaseModel):
    ended: bool
    message: str
    outcome: str


class PromptResponse(BaseModel):
    competition_id: int
    prompt: str


class SummaryResponse(BaseModel):
    competition_id: int
    summary_title: str
    winner: str
    user_total: float
    challenger_total: float
    daily_highlights: list[str]
    motivation: str
    rendered: str = Field(description="Text stored in competition.summary.")


class ValidateSummaryRequest(BaseModel):
    candidate: str = Field(
        min_length=1,
        description="Raw model reply. Text around the JSON object is ignored.",
    )


class ValidationResponse(BaseModel):
    valid: bool
    expected_user_total: int
    expected_challenger_total: int
    message: str
