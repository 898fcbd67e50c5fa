"""
Unit tests for the in-memory competition store.

Covered scenarios:
  - daily score table (every combination of unset / hit / miss)
  - record_stat creates one row per user and day, re-recording overwrites
  - start_competition rejects same participant, inverted ranges, overlaps
  - overlap rule: start-date-only by default, full interval when strict
  - end_competition before / after the end date, win and tie outcomes
  - unknown event kinds fail before any state changes
"""
from __future__ import annotations

from datetime import date, datetime

import pytest

from app.core.errors import (
    CompetitionNotFoundError,
    InvalidDateRangeError,
    NoMatchingCompetitionError,
    OverlappingCompetitionError,
    SameParticipantError,
    UnknownEventKindError,
)
from app.models.competition import DailyStat, daily_score
from app.services.competition import CompetitionStore, EventKind


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _start(store, user="Alice", challenger="Bob", start="2025-05-05", end="2025-05-09"):
    return store.start_competition(
        user, challenger, date.fromisoformat(start), date.fromisoformat(end)
    )


# ---------------------------------------------------------------------------
# Daily score
# ---------------------------------------------------------------------------

class TestDailyScore:
    @pytest.mark.parametrize(
        "bedtime, wakeup, expected",
        [
            (None, None, 0),
            (True, None, 1),
            (None, True, 1),
            (False, None, -1),
            (None, False, -1),
            (True, True, 2),
            (False, False, -2),
            (True, False, 0),
            (False, True, 0),
        ],
    )
    def test_score_table(self, bedtime, wakeup, expected):
        assert daily_score(bedtime, wakeup) == expected
        stat = DailyStat(user="Alice", date=date(2025, 5, 5),
                         bedtime_success=bedtime, wakeup_success=wakeup)
        assert stat.daily_score == expected

    def test_score_follows_flag_changes(self):
        stat = DailyStat(user="Alice", date=date(2025, 5, 5))
        assert stat.daily_score == 0
        stat.bedtime_success = True
        assert stat.daily_score == 1
        stat.bedtime_success = False
        assert stat.daily_score == -1


# ---------------------------------------------------------------------------
# Start
# ---------------------------------------------------------------------------

class TestStartCompetition:
    def test_ids_are_stable_and_increasing(self, store):
        a = _start(store)
        b = _start(store, "Carol", "Dan")
        assert (a.id, b.id) == (1, 2)
        assert store.get(1) is a
        assert [c.id for c in store.competitions()] == [1, 2]

    def test_new_competition_is_empty(self, store):
        c = _start(store)
        assert c.outcome == ""
        assert c.summary == ""
        assert c.daily_stats == []

    def test_same_participant_rejected(self, store):
        with pytest.raises(SameParticipantError):
            _start(store, "Alice", "Alice")
        assert store.competitions() == []

    def test_end_before_start_rejected(self, store):
        with pytest.raises(InvalidDateRangeError):
            _start(store, start="2025-05-09", end="2025-05-05")

    def test_single_day_competition_allowed(self, store):
        c = _start(store, start="2025-05-05", end="2025-05-05")
        assert c.start_date == c.end_date

    def test_datetime_bounds_are_truncated_to_dates(self, store):
        c = store.start_competition(
            "Alice", "Bob", datetime(2025, 5, 5, 22, 30), datetime(2025, 5, 9, 6, 0)
        )
        assert c.start_date == date(2025, 5, 5)
        assert c.end_date == date(2025, 5, 9)

    def test_overlap_on_start_date_rejected_for_either_role(self, store):
        _start(store)
        with pytest.raises(OverlappingCompetitionError) as exc:
            _start(store, "Carol", "Alice", start="2025-05-07", end="2025-05-20")
        assert exc.value.details == {"participant": "Alice", "competition_id": 1}
        with pytest.raises(OverlappingCompetitionError):
            _start(store, "Bob", "Carol", start="2025-05-09", end="2025-05-12")

    def test_unrelated_pair_may_overlap(self, store):
        _start(store)
        c = _start(store, "Carol", "Dan", start="2025-05-06", end="2025-05-08")
        assert c.id == 2

    def test_range_swallowing_existing_one_is_accepted_by_default(self, store):
        _start(store)
        c = _start(store, "Alice", "Carol", start="2025-05-01", end="2025-05-20")
        assert c.id == 2

    def test_strict_overlap_rejects_any_intersection(self):
        strict = CompetitionStore(strict_overlap=True)
        _start(strict)
        with pytest.raises(OverlappingCompetitionError):
            _start(strict, "Alice", "Carol", start="2025-05-01", end="2025-05-20")
        c = _start(strict, "Alice", "Carol", start="2025-05-10", end="2025-05-20")
        assert c.id == 2

    def test_get_unknown_id(self, store):
        with pytest.raises(CompetitionNotFoundError):
            store.get(99)


# ---------------------------------------------------------------------------
# Record
# ---------------------------------------------------------------------------

class TestRecordStat:
    def test_creates_row_and_sets_flag(self, store):
        c = _start(store)
        stat = store.record_stat("Alice", date(2025, 5, 5), EventKind.BEDTIME, True)
        assert c.daily_stats == [stat]
        assert stat.bedtime_success is True
        assert stat.wakeup_success is None
        assert stat.daily_score == 1

    def test_second_event_updates_same_row(self, store):
        c = _start(store)
        store.record_stat("Alice", date(2025, 5, 5), EventKind.BEDTIME, True)
        stat = store.record_stat("Alice", date(2025, 5, 5), EventKind.WAKEUP, False)
        assert len(c.daily_stats) == 1
        assert stat.daily_score == 0

    def test_recording_twice_overwrites(self, store):
        c = _start(store)
        store.record_stat("Bob", date(2025, 5, 6), EventKind.WAKEUP, True)
        stat = store.record_stat("Bob", date(2025, 5, 6), EventKind.WAKEUP, False)
        assert len(c.daily_stats) == 1
        assert stat.wakeup_success is False
        assert stat.daily_score == -1

    def test_repeating_identical_event_is_idempotent(self, store):
        c = _start(store)
        for _ in range(3):
            stat = store.record_stat("Alice", date(2025, 5, 5), EventKind.BEDTIME, True)
            assert len(c.daily_stats) == 1
            assert stat.daily_score == 1
        assert c.daily_stats[0] is stat

    def test_time_of_day_ignored(self, store):
        c = _start(store)
        store.record_stat("Alice", datetime(2025, 5, 5, 23, 0), EventKind.BEDTIME, True)
        store.record_stat("Alice", datetime(2025, 5, 5, 7, 0), EventKind.WAKEUP, True)
        assert len(c.daily_stats) == 1
        assert c.daily_stats[0].daily_score == 2

    def test_no_matching_competition(self, store):
        _start(store)
        with pytest.raises(NoMatchingCompetitionError):
            store.record_stat("Alice", date(2025, 5, 10), EventKind.BEDTIME, True)
        with pytest.raises(NoMatchingCompetitionError):
            store.record_stat("Carol", date(2025, 5, 5), EventKind.BEDTIME, True)

    def test_unknown_event_kind_changes_nothing(self, store):
        c = _start(store)
        with pytest.raises(UnknownEventKindError) as exc:
            store.record_stat("Alice", date(2025, 5, 5), "nap", True)
        assert exc.value.details["allowed"] == ["bedtime", "wakeup"]
        assert c.daily_stats == []

    def test_stat_lands_in_the_users_competition(self, store):
        first = _start(store)
        second = _start(store, "Carol", "Dan")
        store.record_stat("Dan", date(2025, 5, 7), EventKind.WAKEUP, True)
        assert first.daily_stats == []
        assert len(second.daily_stats) == 1


# ---------------------------------------------------------------------------
# End
# ---------------------------------------------------------------------------

class TestEndCompetition:
    def test_not_ended_yet(self, store):
        c = _start(store)
        msg = store.end_competition(c.id, today=date(2025, 5, 8))
        assert msg == "Competition between Alice and Bob has not ended yet"
        assert c.outcome == ""

    def test_ends_on_end_date(self, store):
        c = _start(store)
        assert store.has_ended(c, today=date(2025, 5, 9))
        assert store.end_competition(c.id, today=date(2025, 5, 9)) == "It's a tie! (0 to 0)"

    def test_user_wins(self, store):
        c = _start(store)
        for day in (5, 6):
            store.record_stat("Alice", date(2025, 5, day), EventKind.BEDTIME, True)
            store.record_stat("Alice", date(2025, 5, day), EventKind.WAKEUP, True)
            store.record_stat("Bob", date(2025, 5, day), EventKind.BEDTIME, False)
        # Uses the injected clock (2025-06-01).
        assert store.end_competition(c.id) == "Alice wins! (4 to -2)"
        assert c.outcome == "Alice wins! (4 to -2)"

    def test_challenger_wins_shows_challenger_total_first(self, store):
        c = _start(store)
        store.record_stat("Bob", date(2025, 5, 5), EventKind.BEDTIME, True)
        store.record_stat("Alice", date(2025, 5, 5), EventKind.BEDTIME, False)
        assert store.end_competition(c.id) == "Bob wins! (1 to -1)"

    def test_tie_with_equal_totals(self, store):
        c = _start(store)
        # Alice: 0 then +1. Bob: +1 then 0.
        store.record_stat("Alice", date(2025, 5, 5), EventKind.BEDTIME, True)
        store.record_stat("Alice", date(2025, 5, 5), EventKind.WAKEUP, False)
        store.record_stat("Alice", date(2025, 5, 6), EventKind.BEDTIME, True)
        store.record_stat("Bob", date(2025, 5, 5), EventKind.WAKEUP, True)
        store.record_stat("Bob", date(2025, 5, 6), EventKind.BEDTIME, False)
        store.record_stat("Bob", date(2025, 5, 6), EventKind.WAKEUP, True)
        scores = {(s.user, s.date.day): s.daily_score for s in c.daily_stats}
        assert scores == {("Alice", 5): 0, ("Alice", 6): 1, ("Bob", 5): 1, ("Bob", 6): 0}
        assert store.end_competition(c.id) == "It's a tie! (1 to 1)"

    def test_end_is_idempotent_after_end_date(self, store):
        c = _start(store)
        store.record_stat("Alice", date(2025, 5, 5), EventKind.BEDTIME, True)
        early = store.end_competition(c.id, today=date(2025, 5, 8))
        assert early == "Competition between Alice and Bob has not ended yet"
        assert c.outcome == ""

        first = store.end_competition(c.id, today=date(2025, 5, 10))
        second = store.end_competition(c.id, today=date(2025, 5, 10))
        assert first == second == "Alice wins! (1 to 0)"
        assert c.outcome == first

    def test_repeat_call_recomputes(self, store):
        c = _start(store)
        assert store.end_competition(c.id) == "It's a tie! (0 to 0)"
        c.daily_stats.append(DailyStat("Bob", date(2025, 5, 8), True, True))
        assert store.end_competition(c.id) == "Bob wins! (2 to 0)"

    def test_totals_ignore_rows_outside_window(self, store):
        c = _start(store)
        c.daily_stats.append(DailyStat("Alice", date(2025, 4, 30), True, True))
        totals = store.totals(c)
        assert (totals.user_total, totals.challenger_total) == (0, 0)
        assert totals.leader is None
