"""
Competition store: head-to-head bedtime / wake-up competitions.

Scoring
-------
  Each DailyStat scores +1 per successful flag, -1 per missed flag and
  0 for a flag nobody reported (range -2..+2). The score is derived from
  the flags on every read, see `app.models.competition.daily_score`.

  A competition's outcome compares the summed daily scores of both
  participants inside [start_date, end_date].

Overlap rule
------------
  By default only the new competition's start_date is tested against the
  ranges of existing competitions of either participant. A competition
  starting before an existing one and running into it is accepted.
  `strict_overlap=True` tests the full interval instead.

In-memory, single process, no locking: callers that record stats from
several threads must serialize access per competition themselves.

Public API
----------
CompetitionStore.start_competition(user, challenger, start, end) -> Competition
CompetitionStore.record_stat(user, day, event_kind, success)      -> DailyStat
CompetitionStore.end_competition(competition_id, today)           -> str
CompetitionStore.get(competition_id) / .competitions() / .totals(competition)
"""
from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Callable, Optional, Union

from app.core.errors import (
    CompetitionNotFoundError,
    InvalidDateRangeError,
    NoMatchingCompetitionError,
    OverlappingCompetitionError,
    SameParticipantError,
    UnknownEventKindError,
)
from app.models.competition import Competition, DailyStat

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Event kind constants
# ---------------------------------------------------------------------------

class EventKind:
    BEDTIME = "bedtime"
    WAKEUP  = "wakeup"

    ALL = [BEDTIME, WAKEUP]


DRAW = "Draw"


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------

@dataclass
class CompetitionTotals:
    user_total: int
    challenger_total: int

    @property
    def leader(self) -> Optional[str]:
        """'user', 'challenger', or None on a tie."""
        if self.user_total > self.challenger_total:
            return "user"
        if self.challenger_total > self.user_total:
            return "challenger"
        return None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _today() -> date:
    return datetime.now(tz=timezone.utc).date()


def as_day(value: Union[date, datetime]) -> date:
    """Drop the time of day; competitions work on calendar dates."""
    if isinstance(value, datetime):
        return value.date()
    return value


def format_outcome(competition: Competition, totals: CompetitionTotals) -> str:
    u, c = totals.user_total, totals.challenger_total
    if totals.leader == "user":
        return f"{competition.user} wins! ({u} to {c})"
    if totals.leader == "challenger":
        return f"{competition.challenger} wins! ({c} to {u})"
    return f"It's a tie! ({u} to {c})"


def not_ended_message(competition: Competition) -> str:
    return (
        f"Competition between {competition.user} and {competition.challenger} "
        "has not ended yet"
    )


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class CompetitionStore:
    """Owns every competition of the process, keyed by a stable integer id."""

    def __init__(
        self,
        strict_overlap: bool = False,
        clock: Callable[[], date] = _today,
    ) -> None:
        self.strict_overlap = strict_overlap
        self._clock = clock
        self._competitions: dict[int, Competition] = {}
        self._ids = itertools.count(1)

    # --- lookup -------------------------------------------------------------

    def get(self, competition_id: int) -> Competition:
        competition = self._competitions.get(competition_id)
        if competition is None:
            raise CompetitionNotFoundError(competition_id)
        return competition

    def competitions(self) -> list[Competition]:
        return list(self._competitions.values())

    def find_for(self, user: str, day: date) -> Optional[Competition]:
        """First competition (by id) where `user` plays and `day` is in range."""
        for competition in self._competitions.values():
            if competition.has_participant(user) and competition.covers(day):
                return competition
        return None

    # --- start --------------------------------------------------------------

    def _conflicts(self, existing: Competition, start: date, end: date) -> bool:
        if self.strict_overlap:
            return start <= existing.end_date and existing.start_date <= end
        return existing.covers(start)

    def start_competition(
        self,
        user: str,
        challenger: str,
        start_date: Union[date, datetime],
        end_date: Union[date, datetime],
    ) -> Competition:
        if user == challenger:
            raise SameParticipantError(user)

        start, end = as_day(start_date), as_day(end_date)
        if end < start:
            raise InvalidDateRangeError(start, end)

        for existing in self._competitions.values():
            if not self._conflicts(existing, start, end):
                continue
            for participant in (user, challenger):
                if existing.has_participant(participant):
                    raise OverlappingCompetitionError(participant, existing.id)

        competition = Competition(
            id=next(self._ids),
            user=user,
            challenger=challenger,
            start_date=start,
            end_date=end,
        )
        self._competitions[competition.id] = competition
        logger.info(
            "Competition %d started: %s vs %s (%s..%s)",
            competition.id, user, challenger, start, end,
        )
        return competition

    # --- record -------------------------------------------------------------

    def record_stat(
        self,
        user: str,
        day: Union[date, datetime],
        event_kind: str,
        success: bool,
    ) -> DailyStat:
        """
        Set the bedtime or wake-up flag of `user` on `day`.

        Creates the DailyStat on first use. Raises before touching any
        state if the event kind is unknown or no competition matches.
        """
        if event_kind not in EventKind.ALL:
            raise UnknownEventKindError(event_kind, EventKind.ALL)

        target = as_day(day)
        competition = self.find_for(user, target)
        if competition is None:
            raise NoMatchingCompetitionError(user, target)

        stat = competition.find_stat(user, target)
        if stat is None:
            stat = DailyStat(user=user, date=target)
            competition.daily_stats.append(stat)

        if event_kind == EventKind.BEDTIME:
            stat.bedtime_success = success
        else:
            stat.wakeup_success = success

        logger.debug(
            "Competition %d: %s %s on %s -> %s (score %d)",
            competition.id, user, event_kind, target, success, stat.daily_score,
        )
        return stat

    # --- scoring ------------------------------------------------------------

    def totals(self, competition: Competition) -> CompetitionTotals:
        """Sum daily scores per participant, ignoring rows outside the window."""
        user_total = 0
        challenger_total = 0
        for stat in competition.daily_stats:
            if not competition.covers(stat.date):
                continue
            if stat.user == competition.user:
                user_total += stat.daily_score
            elif stat.user == competition.challenger:
                challenger_total += stat.daily_score
        return CompetitionTotals(user_total=user_total, challenger_total=challenger_total)

    def has_ended(self, competition: Competition, today: Optional[date] = None) -> bool:
        return (today or self._clock()) >= competition.end_date

    def end_competition(self, competition_id: int, today: Optional[date] = None) -> str:
        """
        Compute and store the outcome once the end date is reached.

        Before then, return a "has not ended yet" message and leave the
        outcome empty. Calling it again recomputes from the current stats.
        """
        competition = self.get(competition_id)
        if not self.has_ended(competition, today):
            return not_ended_message(competition)

        competition.outcome = format_outcome(competition, self.totals(competition))
        logger.info("Competition %d ended: %s", competition.id, competition.outcome)
        return competition.outcome
