# File: finquest_app/modules/gaming/services/progression_engine.py
"""
Progression Engine
==================
Orchestrates a quiz play-through: question selection, answer submission,
session completion and the XP/unlock rules applied to the progress tracker.

Each operation is one unit of work run through ``run_in_transaction``:
it either commits fully or leaves no trace. Signals are only sent after a
successful commit.
"""

from typing import List, Optional

from flask import current_app
from sqlalchemy.orm.exc import StaleDataError

from finquest_app.core.error_handlers import ValidationError
from finquest_app.core.extensions import db
from finquest_app.core.signals import (
    level_completed,
    map_completed,
    quiz_answer_submitted,
    quiz_session_completed,
    quiz_session_started,
)
from finquest_app.utils.db_session import run_in_transaction

from ..exceptions import (
    ConcurrentUpdate,
    InsufficientContent,
    InvalidLevel,
    QuestionAlreadyAnswered,
    QuestionNotInSession,
    SessionClosed,
)
from ..logics.answer_logic import is_answer_correct
from ..logics.progression_logic import evaluate_level_completion
from ..logics.selection_logic import NotEnoughQuestions, select_question_ids
from ..schemas import AnswerResultDTO, CompletionResultDTO, SessionStartDTO
from .answer_ledger_service import AnswerLedgerService
from .gaming_config_service import GamingConfigService
from .progress_service import ProgressService
from .question_bank_service import QuestionBankService
from .quiz_session_service import QuizSessionService


class ProgressionEngine:
    """Entry point for every progression-changing operation."""

    @staticmethod
    def validate_level(level) -> int:
        max_level = GamingConfigService.get_config('MAX_LEVELS_PER_MAP')
        if isinstance(level, bool) or not isinstance(level, int) or not 1 <= level <= max_level:
            raise InvalidLevel(level, max_level)
        return level

    @staticmethod
    def select_questions(user_id: str, level: int, count: Optional[int] = None, rng=None) -> List[int]:
        """
        Pick question ids for a session, unanswered ones first.

        Raises:
            InsufficientContent: the level's active catalog is smaller than ``count``.
        """
        if count is None:
            count = GamingConfigService.get_config('QUESTIONS_PER_SESSION')
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise ValidationError('Question count must be a positive integer', errors={'count': count})

        catalog_ids = QuestionBankService.list_question_ids(level)
        answered_ids = AnswerLedgerService.list_answered_question_ids(user_id, level)
        try:
            return select_question_ids(catalog_ids, answered_ids, count, rng=rng)
        except NotEnoughQuestions as exc:
            current_app.logger.warning(
                f"[Gaming] Level {level} has {exc.available} active questions, {exc.requested} requested"
            )
            raise InsufficientContent(level, exc.requested, exc.available)

    @staticmethod
    def start_session(user_id: str, level: int, count: Optional[int] = None) -> SessionStartDTO:
        """Create a session for ``level`` and return its questions without answers."""
        ProgressionEngine.validate_level(level)
        question_ids = ProgressionEngine.select_questions(user_id, level, count)

        def _work():
            ProgressService.get_or_create_progress(user_id)
            return QuizSessionService.stage_session(user_id, level, question_ids)

        session = run_in_transaction(db.session, _work, conflict_retries=1)
        session_id = session.session_id

        questions = QuestionBankService.get_questions(question_ids)
        current_app.logger.info(
            f"[Gaming] Session {session_id} started: user={user_id} level={level} questions={question_ids}"
        )
        quiz_session_started.send(
            None,
            user_id=user_id,
            session_id=session_id,
            level=level,
            question_count=len(question_ids),
        )
        return SessionStartDTO(
            session_id=session_id,
            level=level,
            questions=[question.to_payload() for question in questions],
        )

    @staticmethod
    def _stale_session_error(session_id: str, user_id: str):
        """Translate a lost optimistic-lock race into the error the caller should see."""
        session = QuizSessionService.get_session(session_id)
        if session is not None and session.completed:
            return SessionClosed(session_id)
        return ConcurrentUpdate(user_id)

    @staticmethod
    def submit_answer(session_id: str, question_id, selected_answer) -> AnswerResultDTO:
        """
        Grade one answer against the authoritative catalog entry.

        The session, its score and the answer ledger are updated together.
        """
        session = QuizSessionService.require_session(session_id)
        user_id = session.user_id

        try:
            question_id = int(question_id)
        except (TypeError, ValueError):
            raise QuestionNotInSession(session_id, question_id)
        selected_answer = '' if selected_answer is None else str(selected_answer)

        def _work():
            session = QuizSessionService.require_open(QuizSessionService.require_session(session_id))
            if question_id not in (session.question_ids or []):
                raise QuestionNotInSession(session_id, question_id)
            if question_id in session.answered_question_ids:
                raise QuestionAlreadyAnswered(session_id, question_id)

            question = QuestionBankService.get_question(question_id)
            if question is None:
                raise QuestionNotInSession(session_id, question_id)

            correct = is_answer_correct(selected_answer, question.correct_answer)
            QuizSessionService.stage_answer(
                session, question_id, selected_answer, question.correct_answer, correct
            )
            AnswerLedgerService.stage_answer(session.user_id, question_id, session.level, correct)
            return AnswerResultDTO(
                is_correct=correct,
                correct_answer=question.correct_answer,
                explanation=question.explanation,
                score=session.score,
            )

        try:
            result = run_in_transaction(db.session, _work, conflict_retries=1)
        except StaleDataError:
            raise ProgressionEngine._stale_session_error(session_id, user_id)

        quiz_answer_submitted.send(
            None,
            user_id=user_id,
            session_id=session_id,
            question_id=question_id,
            is_correct=result.is_correct,
            score=result.score,
        )
        return result

    @staticmethod
    def complete_session(session_id: str, final_score: Optional[int] = None) -> CompletionResultDTO:
        """
        Close a session and apply the progression rules to the tracker.

        The server-tracked session score is authoritative. A second completion
        of the same session raises ``SessionClosed``.
        """
        session = QuizSessionService.require_session(session_id)
        user_id = session.user_id
        rules = GamingConfigService.get_rules()

        def _work():
            session = QuizSessionService.require_open(QuizSessionService.require_session(session_id))
            score = session.score or 0
            if final_score is not None and final_score != score:
                current_app.logger.warning(
                    f"[Gaming] Session {session_id}: reported score {final_score} "
                    f"ignored, recorded score is {score}"
                )

            progress = ProgressService.get_or_create_progress(session.user_id)
            entry = progress.map_progress.get(progress.current_map)
            outcome = evaluate_level_completion(
                level=session.level,
                score=score,
                levels_completed=entry.levels_completed if entry else [],
                current_level=progress.current_level,
                rules=rules,
                question_count=len(session.question_ids or []),
            )

            new_achievements = []
            if outcome.grants_credit:
                new_achievements = ProgressService.apply_credit(progress, session.level, score, outcome)

            QuizSessionService.stage_completion(session, final_score)
            return session.level, score, progress.current_map, outcome, new_achievements, progress

        try:
            level, score, map_number, outcome, new_achievements, progress = run_in_transaction(
                db.session, _work
            )
        except StaleDataError:
            raise ProgressionEngine._stale_session_error(session_id, user_id)

        result = CompletionResultDTO(
            earned_xp=outcome.earned_xp,
            total_xp=progress.total_xp,
            level_unlocked=progress.current_level,
            is_map_completed=outcome.is_map_completed,
            is_repeat_level=outcome.is_repeat,
            passed=outcome.passed,
            score=score,
            new_achievements=new_achievements,
            is_practice=outcome.is_practice,
        )

        current_app.logger.info(
            f"[Gaming] Session {session_id} completed: user={user_id} level={level} "
            f"score={score} passed={outcome.passed} repeat={outcome.is_repeat} xp=+{outcome.earned_xp}"
        )
        quiz_session_completed.send(
            None,
            user_id=user_id,
            session_id=session_id,
            level=level,
            score=score,
            passed=outcome.passed,
            earned_xp=outcome.earned_xp,
            is_repeat_level=outcome.is_repeat,
        )
        if outcome.grants_credit:
            level_completed.send(
                None,
                user_id=user_id,
                map_number=map_number,
                level=level,
                earned_xp=outcome.earned_xp,
            )
            if outcome.is_map_completed:
                map_completed.send(None, user_id=user_id, map_number=map_number)
        return result
