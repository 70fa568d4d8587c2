# File: finquest_app/modules/gaming/services/answer_ledger_service.py
"""
Answer Ledger Service
=====================
Per-user record of answered questions, used only to bias selection away
from questions the player has already seen. Not the score of record.
"""

from datetime import datetime, timezone
from typing import Set

from finquest_app.core.extensions import db
from finquest_app.utils.db_session import run_in_transaction

from ..models import AnsweredQuestion


class AnswerLedgerService:
    """Upserts and lookups on ``user_answered_questions``."""

    @staticmethod
    def stage_answer(user_id: str, question_id: int, level: int, is_correct: bool) -> AnsweredQuestion:
        """
        Upsert the (user, question) row in the current transaction, without committing.

        A concurrent insert of the same pair surfaces as ``IntegrityError`` on
        flush; callers re-run their unit of work, which then takes the update path.
        """
        record = AnsweredQuestion.query.filter_by(user_id=user_id, question_id=question_id).first()
        now = datetime.now(timezone.utc)
        if record:
            record.level = level
            record.is_correct = is_correct
            record.answered_at = now
        else:
            record = AnsweredQuestion(
                user_id=user_id,
                question_id=question_id,
                level=level,
                is_correct=is_correct,
                answered_at=now,
            )
            db.session.add(record)
        db.session.flush()
        return record

    @staticmethod
    def record_answer(user_id: str, question_id: int, level: int, is_correct: bool) -> AnsweredQuestion:
        """Upsert keyed by (user, question); calling twice updates, never duplicates."""
        return run_in_transaction(
            db.session,
            lambda: AnswerLedgerService.stage_answer(user_id, question_id, level, is_correct),
            conflict_retries=1,
        )

    @staticmethod
    def list_answered_question_ids(user_id: str, level: int) -> Set[int]:
        rows = (
            db.session.query(AnsweredQuestion.question_id)
            .filter_by(user_id=user_id, level=level)
            .all()
        )
        return {row.question_id for row in rows}

    @staticmethod
    def get_record(user_id: str, question_id: int):
        return AnsweredQuestion.query.filter_by(user_id=user_id, question_id=question_id).first()
