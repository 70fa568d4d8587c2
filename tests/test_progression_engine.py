"""
Tests for the Progression Engine.

Tests cover:
- Session start, answer submission and completion
- XP and level unlock rules applied to the progress tracker
- Repeat and failed levels
- Out-of-order map completion
- Rejected operations leave no trace
- Signals sent after commit
- Racing completions of one session
"""

import threading

import pytest

from finquest_app.core.error_handlers import ValidationError
from finquest_app.core.extensions import db
from finquest_app.core.signals import level_completed, map_completed, quiz_session_started
from finquest_app.modules.gaming.exceptions import (
    InsufficientContent,
    InvalidLevel,
    QuestionAlreadyAnswered,
    QuestionNotInSession,
    SessionClosed,
    SessionNotFound,
)
from finquest_app.modules.gaming.models import AnsweredQuestion, QuizSession, UserProgress
from finquest_app.modules.gaming.services.progress_service import ProgressService
from finquest_app.modules.gaming.services.progression_engine import ProgressionEngine


class TestStartSession:

    def test_start_returns_questions_without_answers(self, app, catalog):
        started = ProgressionEngine.start_session('alice', 1)

        assert started.level == 1
        assert len(started.questions) == 4
        assert len({q['question_id'] for q in started.questions}) == 4
        for question in started.questions:
            assert 'correct_answer' not in question
            assert question['question_id'] in catalog[1]

        session = db.session.get(QuizSession, started.session_id)
        assert session.status == QuizSession.STATUS_CREATED
        assert session.score == 0

    def test_start_creates_default_tracker(self, app, catalog):
        ProgressionEngine.start_session('alice', 1)

        progress = ProgressService.require_progress('alice')
        assert progress.current_level == 1
        assert progress.current_map == 1
        assert progress.total_xp == 0

    @pytest.mark.parametrize('level', [0, 5, -1, '1', None, True])
    def test_invalid_level(self, app, catalog, level):
        with pytest.raises(InvalidLevel):
            ProgressionEngine.start_session('alice', level)
        assert QuizSession.query.count() == 0

    def test_insufficient_content(self, app, make_questions):
        make_questions(1, 3)

        with pytest.raises(InsufficientContent) as exc_info:
            ProgressionEngine.start_session('alice', 1, count=4)

        assert exc_info.value.details == {'level': 1, 'requested': 4, 'available': 3}
        assert QuizSession.query.count() == 0

    def test_explicit_count(self, app, make_questions):
        make_questions(1, 3)
        started = ProgressionEngine.start_session('alice', 1, count=3)
        assert len(started.questions) == 3

    def test_invalid_count(self, app, catalog):
        with pytest.raises(ValidationError):
            ProgressionEngine.start_session('alice', 1, count=0)

    def test_unanswered_questions_served_first(self, app, make_questions):
        ids = make_questions(1, 8)
        first = ProgressionEngine.start_session('alice', 1)
        for question in first.questions:
            ProgressionEngine.submit_answer(first.session_id, question['question_id'], 'Option A')

        second = ProgressionEngine.start_session('alice', 1)

        first_ids = {q['question_id'] for q in first.questions}
        second_ids = {q['question_id'] for q in second.questions}
        assert second_ids == set(ids) - first_ids

    def test_start_sends_signal(self, app, catalog):
        received = []

        def receiver(sender, **kwargs):
            received.append(kwargs)

        with quiz_session_started.connected_to(receiver):
            started = ProgressionEngine.start_session('alice', 2)

        assert received == [{
            'user_id': 'alice',
            'session_id': started.session_id,
            'level': 2,
            'question_count': 4,
        }]


class TestSubmitAnswer:

    def test_correct_answer(self, app, catalog):
        started = ProgressionEngine.start_session('alice', 1)
        question_id = started.questions[0]['question_id']

        result = ProgressionEngine.submit_answer(started.session_id, question_id, '  option a ')

        assert result.is_correct is True
        assert result.correct_answer == 'Option A'
        assert result.explanation
        assert result.score == 1

        session = db.session.get(QuizSession, started.session_id)
        assert session.status == QuizSession.STATUS_IN_PROGRESS
        assert AnsweredQuestion.query.filter_by(user_id='alice', question_id=question_id).one().is_correct

    def test_wrong_answer_does_not_score(self, app, catalog):
        started = ProgressionEngine.start_session('alice', 1)

        result = ProgressionEngine.submit_answer(started.session_id, started.questions[0]['question_id'], 'Option B')

        assert result.is_correct is False
        assert result.correct_answer == 'Option A'
        assert result.score == 0

    def test_question_id_may_arrive_as_string(self, app, catalog):
        started = ProgressionEngine.start_session('alice', 1)
        question_id = started.questions[0]['question_id']

        result = ProgressionEngine.submit_answer(started.session_id, str(question_id), 'Option A')
        assert result.is_correct

    def test_foreign_question_leaves_ledger_untouched(self, app, catalog):
        started = ProgressionEngine.start_session('alice', 1)

        with pytest.raises(QuestionNotInSession):
            ProgressionEngine.submit_answer(started.session_id, catalog[2][0], 'Option A')

        assert AnsweredQuestion.query.count() == 0
        session = db.session.get(QuizSession, started.session_id)
        assert session.answers == []
        assert session.score == 0
        assert session.status == QuizSession.STATUS_CREATED

    def test_garbage_question_id(self, app, catalog):
        started = ProgressionEngine.start_session('alice', 1)

        with pytest.raises(QuestionNotInSession):
            ProgressionEngine.submit_answer(started.session_id, 'not-a-number', 'Option A')

    def test_same_question_twice_is_rejected(self, app, catalog):
        started = ProgressionEngine.start_session('alice', 1)
        question_id = started.questions[0]['question_id']
        ProgressionEngine.submit_answer(started.session_id, question_id, 'Option A')

        with pytest.raises(QuestionAlreadyAnswered):
            ProgressionEngine.submit_answer(started.session_id, question_id, 'Option A')

        assert db.session.get(QuizSession, started.session_id).score == 1

    def test_unknown_session(self, app, catalog):
        with pytest.raises(SessionNotFound):
            ProgressionEngine.submit_answer('missing', catalog[1][0], 'Option A')

    def test_unknown_session_wins_over_bad_question_id(self, app, catalog):
        with pytest.raises(SessionNotFound):
            ProgressionEngine.submit_answer('missing', 'not-a-number', 'Option A')

    def test_answer_after_completion(self, app, catalog):
        started = ProgressionEngine.start_session('alice', 1)
        ProgressionEngine.complete_session(started.session_id)

        with pytest.raises(SessionClosed):
            ProgressionEngine.submit_answer(started.session_id, started.questions[0]['question_id'], 'Option A')

    def test_ledger_does_not_duplicate_across_sessions(self, app, make_questions):
        make_questions(1, 4)
        for _ in range(2):
            started = ProgressionEngine.start_session('alice', 1)
            for question in started.questions:
                ProgressionEngine.submit_answer(started.session_id, question['question_id'], 'Option B')

        assert AnsweredQuestion.query.filter_by(user_id='alice').count() == 4


class TestCompleteSession:

    def test_minimum_pass(self, app, catalog, play_level):
        result = play_level('alice', 1, correct=2)

        assert result.passed
        assert result.earned_xp == 150
        assert result.total_xp == 150
        assert result.level_unlocked == 2
        assert not result.is_repeat_level
        assert not result.is_map_completed

    def test_perfect_score(self, app, catalog, play_level):
        result = play_level('alice', 1, correct=4)

        assert result.earned_xp == 350
        assert result.new_achievements == ['first_steps', 'perfect_score']

    def test_three_of_four_end_to_end(self, app, catalog, play_level):
        result = play_level('alice', 1, correct=3)

        assert result.earned_xp == 175
        progress = ProgressService.require_progress('alice')
        assert progress.current_level == 2
        assert progress.completed_levels == [1]
        assert progress.total_xp == 175
        assert progress.total_score == 3
        assert progress.last_played_at is not None

        entry = progress.map_progress[1]
        assert entry.levels_completed == [1]
        assert entry.points_earned is True
        assert entry.completed is False

    def test_level_four_stays_at_four(self, app, catalog, play_level):
        result = play_level('alice', 4, correct=2)
        assert result.level_unlocked == 4

    def test_fail_leaves_tracker_untouched(self, app, catalog, play_level):
        ProgressService.ensure_progress('alice')

        result = play_level('alice', 1, correct=1)

        assert not result.passed
        assert result.earned_xp == 0
        assert result.level_unlocked == 1
        progress = ProgressService.require_progress('alice')
        assert progress.total_xp == 0
        assert progress.total_score == 0
        assert progress.completed_levels == []
        assert progress.last_played_at is None
        assert progress.map_progress == {}

    def test_repeat_level_earns_nothing(self, app, catalog, play_level):
        play_level('alice', 1, correct=2)

        result = play_level('alice', 1, correct=4)

        assert result.passed
        assert result.is_repeat_level
        assert result.earned_xp == 0
        assert result.total_xp == 150
        assert result.level_unlocked == 2
        assert result.new_achievements == []
        assert ProgressService.require_progress('alice').total_score == 2

    def test_double_completion(self, app, catalog):
        started = ProgressionEngine.start_session('alice', 1)
        for question in started.questions[:2]:
            ProgressionEngine.submit_answer(started.session_id, question['question_id'], 'Option A')

        first = ProgressionEngine.complete_session(started.session_id)
        with pytest.raises(SessionClosed):
            ProgressionEngine.complete_session(started.session_id)

        assert first.earned_xp == 150
        assert ProgressService.require_progress('alice').total_xp == 150

    def test_reported_score_is_ignored(self, app, catalog, play_level):
        result = play_level('alice', 1, correct=2, final_score=4)

        assert result.score == 2
        assert result.earned_xp == 150

    def test_out_of_order_map_completion(self, app, catalog, play_level):
        completed_maps = []

        def receiver(sender, **kwargs):
            completed_maps.append(kwargs['map_number'])

        with map_completed.connected_to(receiver):
            results = [play_level('alice', level, correct=2) for level in (4, 2, 3, 1)]
            repeat = play_level('alice', 3, correct=2)

        assert [r.is_map_completed for r in results] == [False, False, False, True]
        assert repeat.is_map_completed
        assert repeat.earned_xp == 0
        assert completed_maps == [1]

        progress = ProgressService.require_progress('alice')
        assert progress.completed_maps == [1]
        assert progress.completed_levels == [1, 2, 3, 4]
        assert progress.current_level == 4
        assert progress.total_xp == 600
        assert progress.map_progress[1].completed is True
        assert 'map_master' in progress.achievements

    def test_level_completed_signal_only_for_credit(self, app, catalog, play_level):
        received = []

        def receiver(sender, **kwargs):
            received.append((kwargs['level'], kwargs['earned_xp']))

        with level_completed.connected_to(receiver):
            play_level('alice', 1, correct=1)
            play_level('alice', 1, correct=3)
            play_level('alice', 1, correct=4)

        assert received == [(1, 175)]

    def test_users_do_not_share_progress(self, app, catalog, play_level):
        play_level('alice', 1, correct=4)
        play_level('bob', 1, correct=2)

        assert ProgressService.require_progress('alice').total_xp == 350
        assert ProgressService.require_progress('bob').total_xp == 150

    def test_complete_without_answers(self, app, catalog):
        started = ProgressionEngine.start_session('alice', 1)
        result = ProgressionEngine.complete_session(started.session_id)

        assert not result.passed
        assert result.score == 0
        assert db.session.get(QuizSession, started.session_id).completed

    def test_short_session_is_not_credited(self, app, catalog):
        started = ProgressionEngine.start_session('alice', 1, count=2)
        for question in started.questions:
            ProgressionEngine.submit_answer(started.session_id, question['question_id'], 'Option A')

        result = ProgressionEngine.complete_session(started.session_id)

        assert result.passed
        assert result.is_practice
        assert result.earned_xp == 0
        assert result.level_unlocked == 1
        assert result.new_achievements == []
        progress = ProgressService.require_progress('alice')
        assert progress.total_xp == 0
        assert progress.completed_levels == []

    def test_four_of_eight_is_not_perfect(self, app, make_questions):
        make_questions(1, 8)
        started = ProgressionEngine.start_session('alice', 1, count=8)
        for question in started.questions[:4]:
            ProgressionEngine.submit_answer(started.session_id, question['question_id'], 'Option A')

        result = ProgressionEngine.complete_session(started.session_id)

        assert result.score == 4
        assert result.is_practice
        assert result.earned_xp == 0
        assert 'perfect_score' not in ProgressService.require_progress('alice').achievements

    def test_standard_session_is_not_practice(self, app, catalog, play_level):
        result = play_level('alice', 1, correct=4)
        assert not result.is_practice

    def test_tracker_is_versioned(self, app, catalog, play_level):
        ProgressService.ensure_progress('alice')
        before = db.session.get(UserProgress, 'alice').version_id

        play_level('alice', 1, correct=2)

        assert db.session.get(UserProgress, 'alice').version_id > before


class TestConcurrentCompletion:

    def test_racing_completions_credit_once(self, file_app, make_questions):
        with file_app.app_context():
            make_questions(1, 4)
            started = ProgressionEngine.start_session('alice', 1)
            for question in started.questions[:2]:
                ProgressionEngine.submit_answer(started.session_id, question['question_id'], 'Option A')

        barrier = threading.Barrier(2)
        results = []
        errors = []

        def complete():
            with file_app.app_context():
                barrier.wait(timeout=10)
                try:
                    results.append(ProgressionEngine.complete_session(started.session_id))
                except Exception as exc:
                    errors.append(exc)

        threads = [threading.Thread(target=complete) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=60)

        assert len(results) == 1
        assert [type(exc) for exc in errors] == [SessionClosed]
        assert results[0].earned_xp == 150

        with file_app.app_context():
            progress = ProgressService.require_progress('alice')
            assert progress.total_xp == 150
            assert progress.completed_levels == [1]
            assert db.session.get(QuizSession, started.session_id).completed
