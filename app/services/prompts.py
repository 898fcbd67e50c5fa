"""
Prompt builders for every LLM call the app makes.

The competition prompt discloses exactly the stats the summary validator
later checks against: one JSON line per DailyStat plus the participants
and the inclusive ISO date window.
"""
from __future__ import annotations

import json
from typing import TYPE_CHECKING

from app.models.competition import Competition, DailyStat
from app.models.planner import Activity

if TYPE_CHECKING:
    from app.schemas.schedule import StudentData


# ---------------------------------------------------------------------------
# Competition summary
# ---------------------------------------------------------------------------

def serialize_stat(stat: DailyStat) -> str:
    """One compact JSON record; keys match the summary response schema."""
    return json.dumps(
        {
            "user": stat.user,
            "date": stat.date.isoformat(),
            "bedtimeSuccess": stat.bedtime_success,
            "wakeUpSuccess": stat.wakeup_success,
            "dailyScore": stat.daily_score,
        },
        separators=(",", ":"),
    )


def build_summary_prompt(competition: Competition) -> str:
    user, challenger = competition.user, competition.challenger
    start = competition.start_date.isoformat()
    end = competition.end_date.isoformat()
    stats = "\n".join(serialize_stat(s) for s in competition.daily_stats)

    return f"""
Competition participants: {user} (user) and {challenger} (challenger)

Input stats (one JSON object per line, date format YYYY-MM-DD):
{stats}

Instructions (must follow exactly):
1) Parse each line as JSON. Ignore lines that are not valid JSON.
2) Sort all parsed entries strictly in ascending order by "date".
3) Only include dates between {start} and {end} (inclusive).
   - Do NOT fabricate or infer any days outside this range.
   - If an input line contains an out-of-range date, ignore it completely.
4) Compute "userTotal" and "challengerTotal" by summing all "dailyScore" values for each participant.
   - Add positive scores and subtract negative ones exactly as written in each parsed JSON.
   - Check that these totals are consistent with the per-day highlights.
5) Build "dailyHighlights" in chronological order, with one entry for every date from {start} to {end}.
   Every entry must contain its date in YYYY-MM-DD form.
6) For each date:
   - If both users have entries, summarize both results (e.g., "{user} hit bedtime while {challenger} missed wake-up").
   - If only one user has data, describe that user's result and state that the other did not report data.
   - If neither user has an entry, note that both participants did not report data.
   - DO NOT ASSUME MISSING DATA IS A MISSED TARGET. Only report what is explicitly given.
   - Do not decrease {challenger}'s or {user}'s score for days they did not report data.
7) Number days sequentially (Day 1, Day 2, ...) regardless of missing data.
8) Determine the winner:
   - If userTotal > challengerTotal -> winner = {user}
   - If challengerTotal > userTotal -> winner = {challenger}
   - If totals tie -> winner = "Draw"
   - If totals and winner disagree, correct the winner to match the totals.
9) Motivation message (one to three sentences):
   - Reflect both scoring and participation.
   - If one user missed several days but scored higher, praise their perseverance while encouraging steadier reporting.
   - If both missed days, focus on teamwork and mutual accountability.
   - If totals tie but participation differs, celebrate the consistent participant and motivate the other to log daily.
   - Keep the tone constructive and grounded in the highlights; no generic praise or scolding.
10) Return VALID JSON ONLY in the exact format below. No explanations, no markdown, no extra text.

Required JSON schema:
{{
  "summaryTitle": "{user} vs {challenger} Weekly Competition Summary",
  "winner": "<NAME if userTotal != challengerTotal otherwise \\"Draw\\">",
  "userTotal": <number>,
  "challengerTotal": <number>,
  "dailyHighlights": ["Day 1 (YYYY-MM-DD): ...", "Day 2 (YYYY-MM-DD): ..."],
  "motivation": "<one to three sentence motivational message>"
}}
"""


# ---------------------------------------------------------------------------
# Day planner
# ---------------------------------------------------------------------------

def format_duration(duration: int, unit: str = "min") -> str:
    """Half-hour slots as text: 1 -> '30 min', 3 -> '1.5 hours'."""
    if duration == 1:
        return f"30 {unit}"
    hours = duration * 0.5
    return f"{hours:g} hours"


def build_assignment_prompt(activities: list[Activity]) -> str:
    listing = "\n".join(
        f"- {a.title} ({format_duration(a.duration, 'minutes')})" for a in activities
    )
    return f"""
You are a helpful AI assistant that creates optimal daily schedules for students.

STUDENT PREFERENCES:
- Exercise activities work well in the morning (6:00 AM - 10:00 AM)
- Classes and study time should be scheduled during focused hours (9:00 AM - 5:00 PM)
- Meals should be at regular intervals (breakfast 7-9 AM, lunch 12-1 PM, dinner 6-8 PM)
- Social activities and relaxation are good for evenings (6:00 PM - 10:00 PM)
- Avoid scheduling demanding activities too late at night (after 10:00 PM)
- Leave buffer time between different types of activities

TIME SYSTEM:
- Times are represented in half-hour slots starting at midnight
- Slot 0 = 12:00 AM, Slot 13 = 6:30 AM, Slot 26 = 1:00 PM, Slot 38 = 7:00 PM, etc.
- There are 48 slots total (24 hours x 2)
- Valid slots are 0-47 (midnight to 11:30 PM)

ACTIVITIES TO SCHEDULE (ONLY THESE - DO NOT ADD OTHERS):
{listing}

CRITICAL REQUIREMENTS:
1. ONLY assign the activities listed above - do NOT add any new activities
2. Use ONLY valid time slots (0-47)
3. Avoid conflicts - don't overlap activities
4. Consider the duration of each activity when scheduling
5. Use appropriate time slots based on the preferences above

Return your response as a JSON object with this exact structure:
{{
  "assignments": [
    {{
      "title": "exact activity title from the list above",
      "startTime": valid_slot_number_0_to_47
    }}
  ]
}}

Return ONLY the JSON object, no additional text."""


# ---------------------------------------------------------------------------
# Student schedule
# ---------------------------------------------------------------------------

_SCHEDULE_ITEM = """    {
      "time": "suggested time",
      "activity": "activity description",
      "category": "category",
      "duration": "duration"
    }"""


def build_schedule_prompt(data: "StudentData") -> str:
    events = "\n".join(
        f"- {e.description} ({e.category}, {e.duration})" for e in data.events
    )
    periods = ",\n".join(
        f'  "{period}": [\n{_SCHEDULE_ITEM}\n  ]'
        for period in ("morning", "afternoon", "evening")
    )
    return f"""
You are a helpful AI assistant that creates optimal daily schedules for students.

Student: {data.student.name}
Preferences: {data.student.preferences}

Here are the student's tasks and events for today:
{events}

Please organize these events into a daily schedule with three time periods:
- Morning (6:00 AM - 12:00 PM)
- Afternoon (12:00 PM - 6:00 PM)
- Evening (6:00 PM - 11:00 PM)

Consider the student's preferences when scheduling. For example:
- Exercise activities work well in the morning
- Classes should be scheduled at their specified times
- Meals should be at regular intervals
- Study time should be during focused hours
- Social activities are good for evenings

Return your response as a JSON object with this exact structure:
{{
{periods}
}}

Make sure to include ALL the provided events in your schedule. Do NOT make up any events that are not provided in the student data."""
