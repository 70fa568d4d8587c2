from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class SessionStartDTO:
    session_id: str
    level: int
    questions: List[Dict[str, Any]]

    def to_dict(self):
        return asdict(self)


@dataclass
class AnswerResultDTO:
    is_correct: bool
    correct_answer: str
    explanation: str
    score: int

    def to_dict(self):
        return asdict(self)


@dataclass
class CompletionResultDTO:
    earned_xp: int
    total_xp: int
    level_unlocked: int
    is_map_completed: bool
    is_repeat_level: bool
    passed: bool
    score: int
    new_achievements: List[str] = field(default_factory=list)
    is_practice: bool = False

    def to_dict(self):
        return asdict(self)


@dataclass
class ResetResultDTO:
    action: str
    current_map: int
    current_level: int
    streak_days: int
    last_daily_reset: Optional[str]
    new_achievements: List[str] = field(default_factory=list)

    def to_dict(self):
        return asdict(self)
