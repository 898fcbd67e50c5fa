from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional


def flag_score(success: Optional[bool]) -> int:
    """+1 for a hit, -1 for a miss, 0 when nothing was reported."""
    if success is None:
        return 0
    return 1 if success else -1


def daily_score(bedtime_success: Optional[bool], wakeup_success: Optional[bool]) -> int:
    return flag_score(bedtime_success) + flag_score(wakeup_success)


@dataclass
class DailyStat:
    """One participant's bedtime / wake-up results for one calendar day."""

    user: str
    date: date
    bedtime_success: Optional[bool] = None
    wakeup_success: Optional[bool] = None

    @property
    def daily_score(self) -> int:
        # Always derived from the two flags; never stored.
        return daily_score(self.bedtime_success, self.wakeup_success)


@dataclass
class Competition:
    """Head-to-head tracking window between two participants."""

    id: int
    user: str
    challenger: str
    start_date: date
    end_date: date
    outcome: str = ""
    summary: str = ""
    daily_stats: list[DailyStat] = field(default_factory=list)

    def has_participant(self, name: str) -> bool:
        return name == self.user or name == self.challenger

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def find_stat(self, user: str, day: date) -> Optional[DailyStat]:
        for stat in self.daily_stats:
            if stat.user == user and stat.date == day:
                return stat
        return None
