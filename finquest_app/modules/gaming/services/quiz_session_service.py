# File: finquest_app/modules/gaming/services/quiz_session_service.py
"""
Quiz Session Service
====================
Persistence and state transitions of quiz sessions:
created -> in_progress (first answer) -> completed (exactly once).

The ``stage_*`` helpers change the session inside the caller's transaction;
the engine commits them together with the ledger and the progress tracker.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from flask import current_app

from finquest_app.core.extensions import db
from finquest_app.utils.db_session import run_in_transaction

from ..exceptions import SessionClosed, SessionNotFound
from ..models import QuizSession


class QuizSessionService:
    """Service layer for database-backed quiz sessions."""

    @staticmethod
    def new_session_id() -> str:
        return str(uuid.uuid4())

    @staticmethod
    def stage_session(user_id: str, level: int, question_ids: List[int]) -> QuizSession:
        """Add a fresh session to the current transaction."""
        session = QuizSession(
            session_id=QuizSessionService.new_session_id(),
            user_id=user_id,
            level=level,
            question_ids=list(question_ids),
            answers=[],
            score=0,
            status=QuizSession.STATUS_CREATED,
        )
        db.session.add(session)
        return session

    @staticmethod
    def get_session(session_id: str) -> Optional[QuizSession]:
        if not session_id:
            return None
        return db.session.get(QuizSession, str(session_id))

    @staticmethod
    def require_session(session_id: str) -> QuizSession:
        session = QuizSessionService.get_session(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    @staticmethod
    def require_owned(session_id: str, user_id: str) -> QuizSession:
        """A session belonging to another user is reported as missing."""
        session = QuizSessionService.require_session(session_id)
        if session.user_id != user_id:
            raise SessionNotFound(session_id)
        return session

    @staticmethod
    def require_open(session: QuizSession) -> QuizSession:
        if session.completed:
            raise SessionClosed(session.session_id)
        return session

    @staticmethod
    def stage_answer(
        session: QuizSession,
        question_id: int,
        selected_answer: str,
        correct_answer: str,
        is_correct: bool,
    ) -> QuizSession:
        """Append an answer; the score moves by one point iff it is correct."""
        answers = list(session.answers or [])
        answers.append({
            'question_id': question_id,
            'selected_answer': selected_answer,
            'correct_answer': correct_answer,
            'is_correct': is_correct,
        })
        # Reassign so the JSON column is marked dirty
        session.answers = answers
        if is_correct:
            session.score = (session.score or 0) + 1
        if session.status == QuizSession.STATUS_CREATED:
            session.status = QuizSession.STATUS_IN_PROGRESS
        return session

    @staticmethod
    def stage_completion(session: QuizSession, final_score: Optional[int] = None) -> QuizSession:
        session.status = QuizSession.STATUS_COMPLETED
        session.final_score = session.score if final_score is None else final_score
        session.completed_at = datetime.now(timezone.utc)
        return session

    @staticmethod
    def get_session_history(user_id: str, limit: int = 20) -> List[QuizSession]:
        """Most recent completed sessions of a user."""
        return (
            QuizSession.query
            .filter_by(user_id=user_id, status=QuizSession.STATUS_COMPLETED)
            .order_by(QuizSession.completed_at.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def purge_stale_sessions(max_age_days: int = 30, now: Optional[datetime] = None) -> int:
        """
        Delete sessions older than ``max_age_days``.

        Sessions are a transaction log for one play-through, not a historical
        asset; answered questions stay in the ledger regardless.
        """
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(days=max_age_days)

        def _work():
            return (
                QuizSession.query
                .filter(QuizSession.created_at < cutoff)
                .delete(synchronize_session=False)
            )

        removed = run_in_transaction(db.session, _work)
        if removed:
            current_app.logger.info(f"[Gaming] Purged {removed} quiz sessions older than {max_age_days} days")
        return removed
