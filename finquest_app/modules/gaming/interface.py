# File: finquest_app/modules/gaming/interface.py
"""
Public API of the gaming module.

Other modules and the transport layer call these functions instead of
reaching into services directly.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from .schemas import AnswerResultDTO, CompletionResultDTO, ResetResultDTO, SessionStartDTO
from .services.progress_service import ProgressService
from .services.progression_engine import ProgressionEngine
from .services.question_bank_service import QuestionBankService
from .services.quiz_session_service import QuizSessionService


class GamingInterface:

    @staticmethod
    def start_session(user_id: str, level: int, count: Optional[int] = None) -> SessionStartDTO:
        return ProgressionEngine.start_session(user_id, level, count)

    @staticmethod
    def submit_answer(user_id: str, session_id: str, question_id, selected_answer) -> AnswerResultDTO:
        """Submit an answer on behalf of the session's owner."""
        QuizSessionService.require_owned(session_id, user_id)
        return ProgressionEngine.submit_answer(session_id, question_id, selected_answer)

    @staticmethod
    def complete_session(user_id: str, session_id: str, final_score: Optional[int] = None) -> CompletionResultDTO:
        QuizSessionService.require_owned(session_id, user_id)
        return ProgressionEngine.complete_session(session_id, final_score)

    @staticmethod
    def get_session(user_id: str, session_id: str) -> Dict[str, Any]:
        session = QuizSessionService.require_owned(session_id, user_id)
        data = session.to_dict()
        data['questions'] = [q.to_payload() for q in QuestionBankService.get_questions(session.question_ids)]
        return data

    @staticmethod
    def get_session_history(user_id: str, limit: int = 20) -> List[Dict[str, Any]]:
        return [session.to_dict() for session in QuizSessionService.get_session_history(user_id, limit)]

    @staticmethod
    def get_progress(user_id: str) -> Dict[str, Any]:
        return ProgressService.get_progress_snapshot(user_id)

    @staticmethod
    def reset_if_due(user_id: str, now: Optional[datetime] = None) -> ResetResultDTO:
        return ProgressService.reset_if_due(user_id, now)

    @staticmethod
    def count_questions(level: int) -> Dict[str, Any]:
        """Catalog availability for a level."""
        ProgressionEngine.validate_level(level)
        return {'level': level, 'count': QuestionBankService.count_active(level)}
