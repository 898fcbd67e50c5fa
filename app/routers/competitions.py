"""
Competitions router.

POST /competitions                        — start a competition
GET  /competitions                        — list competitions
GET  /competitions/{id}                   — one competition with stats and totals
POST /competitions/stats                  — record a bedtime / wake-up result
POST /competitions/{id}/end               — compute the outcome (if the end date passed)
GET  /competitions/{id}/prompt            — the summary prompt sent to the LLM
POST /competitions/{id}/summary           — generate, validate and store a summary
POST /competitions/{id}/summary/validate  — validate a caller-supplied model reply
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.core.deps import get_llm, get_store
from app.models.competition import Competition, DailyStat
from app.schemas.competition import (
    CompetitionListResponse,
    CompetitionResponse,
    DailyStatResponse,
    EndCompetitionRequest,
    EndCompetitionResponse,
    PromptResponse,
    RecordStatRequest,
    RecordStatResponse,
    StartCompetitionRequest,
    SummaryResponse,
    ValidateSummaryRequest,
    ValidationResponse,
)
from app.services.competition import CompetitionStore
from app.services.competition_summary import check_candidate, summarize_competition
from app.services.llm_client import TextGenerator
from app.services.prompts import build_summary_prompt

router = APIRouter(prefix="/competitions", tags=["competitions"])


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _stat_to_response(s: DailyStat) -> DailyStatResponse:
    return DailyStatResponse(
        user=s.user,
        date=s.date,
        bedtime_success=s.bedtime_success,
        wakeup_success=s.wakeup_success,
        daily_score=s.daily_score,
    )


def _competition_to_response(store: CompetitionStore, c: Competition) -> CompetitionResponse:
    totals = store.totals(c)
    return CompetitionResponse(
        id=c.id,
        user=c.user,
        challenger=c.challenger,
        start_date=c.start_date,
        end_date=c.end_date,
        outcome=c.outcome,
        summary=c.summary,
        user_total=totals.user_total,
        challenger_total=totals.challenger_total,
        daily_stats=[_stat_to_response(s) for s in c.daily_stats],
    )


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=CompetitionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start a competition",
    responses={
        409: {"description": "A participant is already in a competition on the start date."},
        422: {"description": "Same user and challenger, or end date before start date."},
    },
)
def start_competition(
    payload: StartCompetitionRequest,
    store: CompetitionStore = Depends(get_store),
):
    """
    Start a head-to-head competition between two different people.

    Only the new start date is tested against the date ranges of the
    participants' existing competitions (unless COMPETITION_STRICT_OVERLAP
    is enabled, which tests the whole range).
    """
    competition = store.start_competition(
        user=payload.user,
        challenger=payload.challenger,
        start_date=payload.start_date,
        end_date=payload.end_date,
    )
    return _competition_to_response(store, competition)


@router.get("", response_model=CompetitionListResponse, summary="List competitions")
def list_competitions(store: CompetitionStore = Depends(get_store)):
    items = [_competition_to_response(store, c) for c in store.competitions()]
    return CompetitionListResponse(total=len(items), items=items)


@router.post(
    "/stats",
    response_model=RecordStatResponse,
    summary="Record a bedtime or wake-up result",
    responses={
        404: {"description": "The user has no competition covering that date."},
        422: {"description": "Unknown event kind."},
    },
)
def record_stat(
    payload: RecordStatRequest,
    store: CompetitionStore = Depends(get_store),
):
    """
    Set `bedtime` or `wakeup` success for a user on a date.

    The competition is found from the user and date. Recording the same
    event twice overwrites the flag; the daily score is recomputed.
    """
    stat = store.record_stat(payload.user, payload.date, payload.event, payload.success)
    competition = store.find_for(payload.user, stat.date)
    return RecordStatResponse(
        competition_id=competition.id,
        stat=_stat_to_response(stat),
    )


@router.get(
    "/{competition_id}",
    response_model=CompetitionResponse,
    summary="Competition detail",
    responses={404: {"description": "Unknown competition id."}},
)
def get_competition(competition_id: int, store: CompetitionStore = Depends(get_store)):
    return _competition_to_response(store, store.get(competition_id))


@router.post(
    "/{competition_id}/end",
    response_model=EndCompetitionResponse,
    summary="Compute the competition outcome",
)
def end_competition(
    competition_id: int,
    payload: EndCompetitionRequest | None = None,
    store: CompetitionStore = Depends(get_store),
):
    """
    Before the end date this returns `ended=false` with a status message
    and leaves the outcome empty. Afterwards the outcome is (re)computed
    from the recorded stats.
    """
    today = payload.today if payload else None
    competition = store.get(competition_id)
    ended = store.has_ended(competition, today)
    message = store.end_competition(competition_id, today=today)
    return EndCompetitionResponse(ended=ended, message=message, outcome=competition.outcome)


# ---------------------------------------------------------------------------
# LLM summary
# ---------------------------------------------------------------------------

@router.get(
    "/{competition_id}/prompt",
    response_model=PromptResponse,
    summary="Summary prompt for this competition",
)
def competition_prompt(competition_id: int, store: CompetitionStore = Depends(get_store)):
    competition = store.get(competition_id)
    return PromptResponse(competition_id=competition.id, prompt=build_summary_prompt(competition))


@router.post(
    "/{competition_id}/summary",
    response_model=SummaryResponse,
    summary="Generate and store a validated LLM summary",
    responses={
        422: {"description": "The generated summary disagrees with the recorded stats."},
        502: {"description": "LLM call failed or its reply had no JSON."},
        503: {"description": "LLM_API_KEY not configured."},
    },
)
async def generate_summary(
    competition_id: int,
    store: CompetitionStore = Depends(get_store),
    llm: TextGenerator = Depends(get_llm),
):
    """
    Ask the LLM for a narrative summary, recompute totals, winner and dates
    from the recorded stats, and store the summary only if everything
    matches. On failure the previous summary is kept.
    """
    summary = await summarize_competition(store, competition_id, llm)
    competition = store.get(competition_id)
    return SummaryResponse(
        competition_id=competition_id,
        summary_title=summary.summary_title,
        winner=summary.winner,
        user_total=summary.user_total,
        challenger_total=summary.challenger_total,
        daily_highlights=summary.daily_highlights,
        motivation=summary.motivation,
        rendered=competition.summary,
    )


@router.post(
    "/{competition_id}/summary/validate",
    response_model=ValidationResponse,
    summary="Validate a model reply without storing it",
    responses={404: {"description": "Unknown competition id."}},
)
def validate_candidate(
    competition_id: int,
    payload: ValidateSummaryRequest,
    store: CompetitionStore = Depends(get_store),
):
    result = check_candidate(store, competition_id, payload.candidate)
    return ValidationResponse(
        valid=result.valid,
        expected_user_total=result.expected_user_total,
        expected_challenger_total=result.expected_challenger_total,
        message=result.message,
    )
