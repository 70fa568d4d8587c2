"""Achievement rules. Pure functions over a progress snapshot."""
from typing import Iterable, List

FIRST_STEPS = 'first_steps'
PERFECT_SCORE = 'perfect_score'
MAP_MASTER = 'map_master'
XP_MILESTONE = 'xp_1000'
STREAK_WEEK = 'streak_7'

ACHIEVEMENT_DESCRIPTIONS = {
    FIRST_STEPS: 'Complete your first level',
    PERFECT_SCORE: 'Answer every question of a level correctly',
    MAP_MASTER: 'Complete every level of a map',
    XP_MILESTONE: 'Earn 1000 XP',
    STREAK_WEEK: 'Play seven days in a row',
}


def evaluate_achievements(
    owned: Iterable[str],
    *,
    credited_level: bool = False,
    perfect_score: bool = False,
    map_completed: bool = False,
    total_xp: int = 0,
    streak_days: int = 0,
    xp_milestone: int = 1000,
    streak_target: int = 7,
) -> List[str]:
    """Return the achievement keys newly earned, in a stable order."""
    owned = set(owned or [])
    earned = []

    def _grant(key, condition):
        if condition and key not in owned:
            earned.append(key)

    _grant(FIRST_STEPS, credited_level)
    _grant(PERFECT_SCORE, perfect_score)
    _grant(MAP_MASTER, map_completed)
    _grant(XP_MILESTONE, total_xp >= xp_milestone)
    _grant(STREAK_WEEK, streak_days >= streak_target)
    return earned
