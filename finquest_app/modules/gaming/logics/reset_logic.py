"""
Daily Reset Logic - pure functions deciding the periodic map/level reset.

Cadence: once per UTC calendar day.
NO database, NO Flask, NO model dependencies allowed.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Optional

ACTION_INITIALIZED = 'initialized'
ACTION_NONE = 'none'
ACTION_ADVANCED_MAP = 'advanced_map'
ACTION_RESTARTED_MAP = 'restarted_map'
ACTION_RESTARTED_LEVEL = 'restarted_level'


@dataclass(frozen=True)
class ResetDecision:
    action: str
    current_map: int
    current_level: int
    streak_days: int
    clear_map_cycle: bool = False

    @property
    def is_due(self) -> bool:
        return self.action != ACTION_NONE


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes (as SQLite returns them) as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def reset_window(moment: datetime) -> date:
    """The reset window a moment falls into (its UTC calendar date)."""
    return as_utc(moment).date()


def next_streak(streak_days: int, last_played_at: Optional[datetime], now: datetime) -> int:
    """Keep the streak alive if the user played today or on the previous day."""
    if last_played_at is None:
        return 0
    played_on = reset_window(last_played_at)
    today = reset_window(now)
    if played_on >= today - timedelta(days=1):
        return (streak_days or 0) + 1
    return 0


def decide_reset(
    now: datetime,
    last_daily_reset: Optional[datetime],
    current_map: int,
    current_level: int,
    map_completed: bool,
    streak_days: int,
    last_played_at: Optional[datetime],
    max_maps: int,
) -> ResetDecision:
    """
    Decide what the daily reset does for one tracker.

    - first call ever: only stamps the window
    - same window as the last reset: no-op
    - completed map: move on to the next map at level 1 (or restart the last map)
    - incomplete map: restart the map's cycle at level 1
    """
    if last_daily_reset is None:
        return ResetDecision(ACTION_INITIALIZED, current_map, current_level, streak_days or 0)

    if reset_window(last_daily_reset) >= reset_window(now):
        return ResetDecision(ACTION_NONE, current_map, current_level, streak_days or 0)

    streak = next_streak(streak_days, last_played_at, now)

    if map_completed:
        if current_map < max_maps:
            return ResetDecision(ACTION_ADVANCED_MAP, current_map + 1, 1, streak)
        return ResetDecision(ACTION_RESTARTED_MAP, current_map, 1, streak, clear_map_cycle=True)

    return ResetDecision(ACTION_RESTARTED_LEVEL, current_map, 1, streak, clear_map_cycle=True)
