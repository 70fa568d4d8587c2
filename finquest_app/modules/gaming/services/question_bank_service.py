# File: finquest_app/modules/gaming/services/question_bank_service.py
"""
Question Bank Service
=====================
Read-mostly access to the quiz catalog. Questions are immutable once seeded;
the active flag is the only field that ever changes.
"""

from typing import List, Optional

from flask import current_app

from finquest_app.core.error_handlers import ValidationError
from finquest_app.core.extensions import db
from finquest_app.core.question_seeds import build_seed_rows
from finquest_app.utils.db_session import run_in_transaction

from ..models import QuizQuestion
from .gaming_config_service import GamingConfigService


class QuestionBankService:
    """Catalog queries, idempotent seeding and deactivation."""

    @staticmethod
    def list_questions(level: int) -> List[QuizQuestion]:
        """Active questions for a level, in stable id order."""
        return (
            QuizQuestion.query
            .filter_by(level=level, is_active=True)
            .order_by(QuizQuestion.question_id)
            .all()
        )

    @staticmethod
    def list_question_ids(level: int) -> List[int]:
        rows = (
            db.session.query(QuizQuestion.question_id)
            .filter_by(level=level, is_active=True)
            .order_by(QuizQuestion.question_id)
            .all()
        )
        return [row.question_id for row in rows]

    @staticmethod
    def count_active(level: int) -> int:
        return QuizQuestion.query.filter_by(level=level, is_active=True).count()

    @staticmethod
    def get_question(question_id: int) -> Optional[QuizQuestion]:
        return db.session.get(QuizQuestion, question_id)

    @staticmethod
    def get_questions(question_ids: List[int]) -> List[QuizQuestion]:
        """Questions in the order of ``question_ids``."""
        if not question_ids:
            return []
        rows = QuizQuestion.query.filter(QuizQuestion.question_id.in_(question_ids)).all()
        by_id = {row.question_id: row for row in rows}
        return [by_id[qid] for qid in question_ids if qid in by_id]

    @staticmethod
    def validate_row(row: dict) -> None:
        """Reject catalog entries that break the question shape."""
        errors = {}
        max_level = GamingConfigService.get_config('MAX_LEVELS_PER_MAP')
        option_count = GamingConfigService.get_config('OPTIONS_PER_QUESTION')

        level = row.get('level')
        if not isinstance(level, int) or not 1 <= level <= max_level:
            errors['level'] = f'must be between 1 and {max_level}'

        options = row.get('options') or []
        if len(options) != option_count:
            errors['options'] = f'exactly {option_count} options required'
        elif len(set(options)) != len(options):
            errors['options'] = 'options must be distinct'

        if row.get('correct_answer') not in options:
            errors['correct_answer'] = 'must be one of the options'

        if not (row.get('question_text') or '').strip():
            errors['question_text'] = 'required'

        if row.get('difficulty') not in QuizQuestion.DIFFICULTIES:
            errors['difficulty'] = f'must be one of {", ".join(QuizQuestion.DIFFICULTIES)}'

        if errors:
            raise ValidationError('Invalid quiz question', errors=errors)

    @staticmethod
    def seed_questions(catalog=None) -> int:
        """
        Seed the catalog once. No-op if any question already exists.

        Args:
            catalog: Level-keyed mapping of question dicts; defaults to the
                built-in financial-literacy catalog.

        Returns:
            Number of inserted questions (0 when the catalog already existed).
        """
        if db.session.query(QuizQuestion.question_id).first() is not None:
            return 0

        rows = build_seed_rows(catalog)
        for row in rows:
            QuestionBankService.validate_row(row)

        def _work():
            for row in rows:
                db.session.add(QuizQuestion(**row))
            return len(rows)

        added = run_in_transaction(db.session, _work)
        current_app.logger.info(f"[Gaming] Seeded {added} quiz questions")
        return added

    @staticmethod
    def deactivate_question(question_id: int) -> bool:
        """Retire a question. Returns False if it does not exist."""
        question = db.session.get(QuizQuestion, question_id)
        if not question:
            return False
        if not question.is_active:
            return True

        def _work():
            question.is_active = False
            return True

        run_in_transaction(db.session, _work)
        current_app.logger.info(f"[Gaming] Deactivated question {question_id}")
        return True
