import os
import sys
import tempfile

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from finquest_app import create_app, db
from finquest_app.core.config import Config
from finquest_app.modules.gaming.config import difficulty_for_level
from finquest_app.modules.gaming.models import QuizQuestion


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'connect_args': {'check_same_thread': False}
    }
    SEED_QUESTIONS_ON_STARTUP = False
    GAMING_RESET_JOB_ENABLED = False
    LOG_DIR = tempfile.mkdtemp(prefix='finquest-test-logs-')


CORRECT = 'Option A'
WRONG = 'Option B'


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def api_app():
    """App without an outer app context, so every request gets a fresh one."""
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def file_app(tmp_path):
    """App on a file-backed SQLite database, so separate threads share data."""

    class FileConfig(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'finquest.db'}"

    app = create_app(FileConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(api_app):
    return api_app.test_client()


def add_questions(level, count, start=0):
    """Insert ``count`` active questions for ``level``. Requires an app context."""
    questions = []
    for index in range(start, start + count):
        question = QuizQuestion(
            level=level,
            question_text=f'Level {level} question {index}',
            options=[CORRECT, WRONG, 'Option C'],
            correct_answer=CORRECT,
            explanation=f'Explanation {index}',
            category='budgeting',
            difficulty=difficulty_for_level(level),
            is_active=True,
        )
        db.session.add(question)
        questions.append(question)
    db.session.commit()
    return [question.question_id for question in questions]


@pytest.fixture
def catalog(app):
    """Six questions on each of the four levels."""
    return {level: add_questions(level, 6) for level in range(1, 5)}


@pytest.fixture
def play_level():
    """Start, answer and complete a session with ``correct`` right answers."""
    from finquest_app.modules.gaming.services.progression_engine import ProgressionEngine

    def _play(user_id, level, correct, final_score=None):
        started = ProgressionEngine.start_session(user_id, level)
        for index, question in enumerate(started.questions):
            answer = CORRECT if index < correct else WRONG
            ProgressionEngine.submit_answer(started.session_id, question['question_id'], answer)
        return ProgressionEngine.complete_session(started.session_id, final_score)

    return _play


@pytest.fixture
def make_questions():
    return add_questions
