from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# 48 half-hour slots starting at midnight: 0 = 12:00 AM, 13 = 6:30 AM.
SLOTS_PER_DAY = 48


@dataclass(eq=False)
class Activity:
    """Something to fit into the day. Durations are in half-hour slots."""

    title: str
    duration: int
    start_time: Optional[int] = None


@dataclass(eq=False)
class Assignment:
    activity: Activity
    start_time: int
