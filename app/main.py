import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.routers import competitions as competitions_router
from app.routers import planner as planner_router
from app.routers import schedule as schedule_router
from app.services.competition import CompetitionStore
from app.services.day_planner import DayPlanner
from app.core.errors import (
    DaybreakException,
    daybreak_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Daybreak API",
    description=(
        "**Bedtime / wake-up competitions with LLM-written, fact-checked summaries**\n\n"
        "Tracks head-to-head sleep-habit competitions, computes the outcome from "
        "recorded daily scores, and only stores an LLM summary after its totals, "
        "winner and dates are recomputed and matched. Also plans a single day "
        "with LLM-proposed time slots.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- In-memory state (process lifetime) ---
app.state.competition_store = CompetitionStore(
    strict_overlap=settings.COMPETITION_STRICT_OVERLAP,
)
app.state.day_planner = DayPlanner()

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(DaybreakException, daybreak_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(competitions_router.router)
app.include_router(planner_router.router)
app.include_router(schedule_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health():
    """
    Returns `{"status": "ok"}` while the API is up.
    Used by Railway / Render for liveness probes.
    """
    return {
        "status": "ok",
        "env": settings.APP_ENV,
        "competitions": len(app.state.competition_store.competitions()),
    }
