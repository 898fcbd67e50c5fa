from .competition import Competition, DailyStat, daily_score
from .planner import Activity, Assignment, SLOTS_PER_DAY

__all__ = [
    "Competition",
    "DailyStat",
    "daily_score",
    "Activity",
    "Assignment",
    "SLOTS_PER_DAY",
]
