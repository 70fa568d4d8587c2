"""
Tests for the gaming services: question bank, answer ledger, quiz sessions.
"""

from datetime import datetime, timedelta, timezone

import pytest

from finquest_app.core.error_handlers import ValidationError
from finquest_app.core.extensions import db
from finquest_app.core.question_seeds import QUESTION_CATALOG, build_seed_rows
from finquest_app.modules.gaming.exceptions import SessionClosed, SessionNotFound
from finquest_app.modules.gaming.models import AnsweredQuestion, QuizQuestion, QuizSession
from finquest_app.modules.gaming.services.answer_ledger_service import AnswerLedgerService
from finquest_app.modules.gaming.services.gaming_config_service import GamingConfigService
from finquest_app.modules.gaming.services.question_bank_service import QuestionBankService
from finquest_app.modules.gaming.services.quiz_session_service import QuizSessionService


class TestQuestionBank:

    def test_seed_default_catalog(self, app):
        added = QuestionBankService.seed_questions()

        assert added == sum(len(questions) for questions in QUESTION_CATALOG.values())
        for level in range(1, 5):
            assert QuestionBankService.count_active(level) >= GamingConfigService.get_config('QUESTIONS_PER_SESSION')

    def test_seed_is_idempotent(self, app):
        first = QuestionBankService.seed_questions()
        second = QuestionBankService.seed_questions()

        assert first > 0
        assert second == 0
        assert QuizQuestion.query.count() == first

    def test_seed_rows_derive_difficulty_from_level(self):
        rows = build_seed_rows()
        difficulties = {row['level']: row['difficulty'] for row in rows}

        assert difficulties == {1: 'easy', 2: 'medium', 3: 'hard', 4: 'hard'}

    def test_default_catalog_is_valid(self, app):
        for row in build_seed_rows():
            QuestionBankService.validate_row(row)
            assert len(row['options']) == 3
            assert row['correct_answer'] in row['options']

    def test_invalid_catalog_is_rejected(self, app):
        catalog = {1: [{
            'question': 'Broken?',
            'options': ['Yes', 'No'],
            'correct_answer': 'Maybe',
            'explanation': 'n/a',
        }]}

        with pytest.raises(ValidationError) as exc_info:
            QuestionBankService.seed_questions(catalog)

        errors = exc_info.value.details['errors']
        assert 'options' in errors
        assert 'correct_answer' in errors
        assert QuizQuestion.query.count() == 0

    def test_duplicate_options_are_rejected(self, app):
        row = build_seed_rows()[0]
        row['options'] = ['A', 'A', 'B']
        row['correct_answer'] = 'A'

        with pytest.raises(ValidationError):
            QuestionBankService.validate_row(row)

    def test_list_questions_only_active_in_id_order(self, app, make_questions):
        ids = make_questions(1, 5)
        make_questions(2, 2)
        QuestionBankService.deactivate_question(ids[2])

        listed = QuestionBankService.list_questions(1)

        assert [q.question_id for q in listed] == [ids[0], ids[1], ids[3], ids[4]]
        assert QuestionBankService.list_question_ids(1) == [ids[0], ids[1], ids[3], ids[4]]

    def test_deactivate_unknown_question(self, app):
        assert QuestionBankService.deactivate_question(999) is False

    def test_get_questions_keeps_requested_order(self, app, make_questions):
        ids = make_questions(1, 4)
        requested = [ids[3], ids[0], ids[2]]

        assert [q.question_id for q in QuestionBankService.get_questions(requested)] == requested

    def test_payload_hides_correct_answer(self, app, make_questions):
        question = QuestionBankService.get_question(make_questions(1, 1)[0])
        payload = question.to_payload()

        assert 'correct_answer' not in payload
        assert payload['options'] == ['Option A', 'Option B', 'Option C']


class TestAnswerLedger:

    def test_record_is_upsert(self, app, make_questions):
        question_id = make_questions(1, 1)[0]

        AnswerLedgerService.record_answer('alice', question_id, 1, False)
        AnswerLedgerService.record_answer('alice', question_id, 1, True)

        rows = AnsweredQuestion.query.filter_by(user_id='alice').all()
        assert len(rows) == 1
        assert rows[0].is_correct is True

    def test_ledger_is_per_user(self, app, make_questions):
        question_id = make_questions(1, 1)[0]

        AnswerLedgerService.record_answer('alice', question_id, 1, True)
        AnswerLedgerService.record_answer('bob', question_id, 1, False)

        assert AnsweredQuestion.query.count() == 2
        assert AnswerLedgerService.get_record('bob', question_id).is_correct is False

    def test_list_answered_ids_by_level(self, app, make_questions):
        level_one = make_questions(1, 2)
        level_two = make_questions(2, 1)
        for question_id in level_one:
            AnswerLedgerService.record_answer('alice', question_id, 1, True)
        AnswerLedgerService.record_answer('alice', level_two[0], 2, True)

        assert AnswerLedgerService.list_answered_question_ids('alice', 1) == set(level_one)
        assert AnswerLedgerService.list_answered_question_ids('bob', 1) == set()


class TestQuizSessions:

    def _create(self, user_id='alice', level=1, question_ids=(1, 2, 3, 4)):
        session = QuizSessionService.stage_session(user_id, level, list(question_ids))
        db.session.commit()
        return session

    def test_new_session_state(self, app):
        session = self._create()

        assert session.status == QuizSession.STATUS_CREATED
        assert session.score == 0
        assert session.answers == []
        assert len(session.session_id) == 36

    def test_answers_move_score_and_status(self, app):
        session = self._create()

        QuizSessionService.stage_answer(session, 1, 'x', 'x', True)
        QuizSessionService.stage_answer(session, 2, 'y', 'x', False)
        db.session.commit()

        assert session.status == QuizSession.STATUS_IN_PROGRESS
        assert session.score == 1
        assert session.answered_question_ids == {1, 2}

    def test_completion_freezes_session(self, app):
        session = self._create()
        QuizSessionService.stage_completion(session)
        db.session.commit()

        assert session.completed
        assert session.completed_at is not None
        with pytest.raises(SessionClosed):
            QuizSessionService.require_open(session)

    def test_unknown_session(self, app):
        with pytest.raises(SessionNotFound):
            QuizSessionService.require_session('missing')

    def test_foreign_session_looks_missing(self, app):
        session = self._create(user_id='alice')

        with pytest.raises(SessionNotFound):
            QuizSessionService.require_owned(session.session_id, 'mallory')
        assert QuizSessionService.require_owned(session.session_id, 'alice') is session

    def test_history_lists_completed_sessions_only(self, app):
        finished = self._create()
        QuizSessionService.stage_completion(finished)
        self._create()
        db.session.commit()

        history = QuizSessionService.get_session_history('alice')
        assert [s.session_id for s in history] == [finished.session_id]

    def test_purge_stale_sessions(self, app):
        self._create()
        self._create()

        assert QuizSessionService.purge_stale_sessions(30) == 0

        later = datetime.now(timezone.utc) + timedelta(days=31)
        assert QuizSessionService.purge_stale_sessions(30, now=later) == 2
        assert QuizSession.query.count() == 0


class TestGamingConfig:

    def test_defaults(self, app):
        assert GamingConfigService.get_config('QUESTIONS_PER_SESSION') == 4
        assert GamingConfigService.get_rules().passing_score == 2

    def test_app_config_overrides_defaults(self, app):
        app.config['GAMING_PASSING_SCORE'] = 3

        assert GamingConfigService.get_config('PASSING_SCORE') == 3
        assert GamingConfigService.get_all_configs()['PASSING_SCORE'] == {'value': 3, 'default': 2}
