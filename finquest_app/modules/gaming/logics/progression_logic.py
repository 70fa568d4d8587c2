"""
Progression Logic - pure functions for XP and level unlocks.

This module contains ONLY pure Python logic.
NO database, NO Flask, NO model dependencies allowed.
"""
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional


@dataclass(frozen=True)
class ProgressionRules:
    """Tunable constants of the unlock/XP rules."""
    questions_per_session: int = 4
    max_levels_per_map: int = 4
    passing_score: int = 2
    xp_per_correct_answer: int = 25
    perfect_score_bonus: int = 150
    level_completion_bonus: int = 100

    @classmethod
    def from_config(cls, get_config: Callable[[str], int]) -> 'ProgressionRules':
        return cls(
            questions_per_session=int(get_config('QUESTIONS_PER_SESSION')),
            max_levels_per_map=int(get_config('MAX_LEVELS_PER_MAP')),
            passing_score=int(get_config('PASSING_SCORE')),
            xp_per_correct_answer=int(get_config('XP_PER_CORRECT_ANSWER')),
            perfect_score_bonus=int(get_config('PERFECT_SCORE_BONUS')),
            level_completion_bonus=int(get_config('LEVEL_COMPLETION_BONUS')),
        )


@dataclass
class LevelOutcome:
    """Result of applying one completed session to a map's state."""
    passed: bool
    is_repeat: bool
    earned_xp: int
    next_level: int
    is_map_completed: bool
    levels_completed: List[int]
    breakdown: Dict[str, int] = field(default_factory=dict)
    is_perfect: bool = False
    # Served set differs from the standard session size: graded, never credited
    is_practice: bool = False

    @property
    def grants_credit(self) -> bool:
        return self.passed and not self.is_repeat and not self.is_practice


def is_passing(score: int, rules: ProgressionRules) -> bool:
    return score >= rules.passing_score


def is_perfect_score(score: int, question_count: int, rules: ProgressionRules) -> bool:
    """Every question of a standard-size session answered correctly."""
    return question_count == rules.questions_per_session and score == question_count


def calculate_earned_xp(score: int, rules: ProgressionRules, question_count: Optional[int] = None):
    """
    XP for a first-time pass: per correct answer + perfect bonus + completion bonus.

    ``question_count`` is the size of the served set; it defaults to the
    standard session size.

    Returns:
        (total_xp, breakdown)

    Examples:
        >>> calculate_earned_xp(2, ProgressionRules())[0]
        150
        >>> calculate_earned_xp(3, ProgressionRules())[0]
        175
        >>> calculate_earned_xp(4, ProgressionRules())[0]
        350
    """
    if question_count is None:
        question_count = rules.questions_per_session
    perfect = is_perfect_score(score, question_count, rules)
    breakdown = {
        'correct_answers': score * rules.xp_per_correct_answer,
        'perfect_score': rules.perfect_score_bonus if perfect else 0,
        'level_completion': rules.level_completion_bonus,
    }
    return sum(breakdown.values()), breakdown


def is_map_complete(levels_completed: Iterable[int], max_levels_per_map: int) -> bool:
    """A map is completed iff every level 1..max is present."""
    return set(range(1, max_levels_per_map + 1)).issubset(set(levels_completed))


def next_level_after(level: int, map_completed: bool, max_levels_per_map: int) -> int:
    """Levels unlock one at a time; a completed map holds at its final level."""
    if map_completed:
        return max_levels_per_map
    return min(level + 1, max_levels_per_map)


def evaluate_level_completion(
    level: int,
    score: int,
    levels_completed: Iterable[int],
    current_level: int,
    rules: ProgressionRules,
    question_count: Optional[int] = None,
) -> LevelOutcome:
    """
    Apply a completed session's score to the current map's state.

    Args:
        level: Level the session was played at.
        score: Correct answers in the session.
        levels_completed: Levels already credited in the current map cycle.
        current_level: The tracker's current level.
        rules: XP and unlock constants.
        question_count: Questions served in the session. Defaults to
            ``rules.questions_per_session``; any other size is graded as
            practice and never credited.

    Returns:
        LevelOutcome. ``levels_completed`` is the map's new sorted list; it only
        differs from the input when the outcome grants credit.
    """
    if question_count is None:
        question_count = rules.questions_per_session
    completed = sorted(set(levels_completed))
    already_complete = is_map_complete(completed, rules.max_levels_per_map)
    repeat = level in completed
    passed = is_passing(score, rules)
    perfect = is_perfect_score(score, question_count, rules)

    if not passed or repeat or question_count != rules.questions_per_session:
        return LevelOutcome(
            passed=passed,
            is_repeat=repeat,
            earned_xp=0,
            next_level=current_level,
            is_map_completed=already_complete,
            levels_completed=completed,
            is_perfect=perfect,
            is_practice=question_count != rules.questions_per_session,
        )

    earned_xp, breakdown = calculate_earned_xp(score, rules, question_count)
    updated = sorted(set(completed) | {level})
    map_done = is_map_complete(updated, rules.max_levels_per_map)

    return LevelOutcome(
        passed=True,
        is_repeat=False,
        earned_xp=earned_xp,
        next_level=next_level_after(level, map_done, rules.max_levels_per_map),
        is_map_completed=map_done,
        levels_completed=updated,
        breakdown=breakdown,
        is_perfect=perfect,
    )
