"""Gaming database models: question catalog, answer ledger, sessions, progress."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.orm.collections import attribute_keyed_dict
from sqlalchemy.types import JSON

from finquest_app.core.extensions import db


def _utcnow():
    return datetime.now(timezone.utc)


def _iso(value):
    return value.isoformat() if value else None


class QuizQuestion(db.Model):
    """Catalog entry. Immutable once seeded; deactivated rather than deleted."""
    __tablename__ = 'quiz_questions'

    question_id = db.Column(db.Integer, primary_key=True)
    level = db.Column(db.Integer, nullable=False)
    question_text = db.Column(db.Text, nullable=False)
    options = db.Column(JSON, nullable=False, default=list)
    correct_answer = db.Column(db.String(255), nullable=False)
    explanation = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(50), nullable=False, default='financial_literacy')
    difficulty = db.Column(db.String(10), nullable=False, default='medium')
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)

    DIFFICULTY_EASY = 'easy'
    DIFFICULTY_MEDIUM = 'medium'
    DIFFICULTY_HARD = 'hard'
    DIFFICULTIES = (DIFFICULTY_EASY, DIFFICULTY_MEDIUM, DIFFICULTY_HARD)

    __table_args__ = (
        db.Index('ix_quiz_questions_level_active', 'level', 'is_active'),
        db.Index('ix_quiz_questions_category_difficulty', 'category', 'difficulty'),
    )

    def to_payload(self) -> dict:
        """Client-safe view: never contains the correct answer."""
        return {
            'question_id': self.question_id,
            'level': self.level,
            'question': self.question_text,
            'options': list(self.options or []),
            'explanation': self.explanation,
            'category': self.category,
            'difficulty': self.difficulty,
        }

    def __repr__(self):
        return f'<QuizQuestion {self.question_id} L{self.level}>'


class AnsweredQuestion(db.Model):
    """Answer ledger row. At most one per (user, question)."""
    __tablename__ = 'user_answered_questions'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False)
    question_id = db.Column(db.Integer, db.ForeignKey('quiz_questions.question_id'), nullable=False)
    level = db.Column(db.Integer, nullable=False)
    is_correct = db.Column(db.Boolean, nullable=False)
    answered_at = db.Column(db.DateTime(timezone=True), default=_utcnow)

    __table_args__ = (
        db.UniqueConstraint('user_id', 'question_id', name='_user_answered_question_uc'),
        db.Index('ix_user_answered_questions_user_level', 'user_id', 'level'),
    )

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'question_id': self.question_id,
            'level': self.level,
            'is_correct': self.is_correct,
            'answered_at': _iso(self.answered_at),
        }


class QuizSession(db.Model):
    """One play-through of a level. Completed exactly once, then frozen."""
    __tablename__ = 'quiz_sessions'

    STATUS_CREATED = 'created'
    STATUS_IN_PROGRESS = 'in_progress'
    STATUS_COMPLETED = 'completed'

    session_id = db.Column(db.String(36), primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)
    level = db.Column(db.Integer, nullable=False)
    question_ids = db.Column(JSON, nullable=False, default=list)
    # [{question_id, selected_answer, correct_answer, is_correct}]
    answers = db.Column(JSON, nullable=False, default=list)
    score = db.Column(db.Integer, nullable=False, default=0)
    final_score = db.Column(db.Integer)
    status = db.Column(db.String(20), nullable=False, default=STATUS_CREATED, index=True)
    version_id = db.Column(db.Integer, nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    completed_at = db.Column(db.DateTime(timezone=True))

    __mapper_args__ = {'version_id_col': version_id}

    @property
    def completed(self) -> bool:
        return self.status == self.STATUS_COMPLETED

    @property
    def answered_question_ids(self) -> set:
        return {answer['question_id'] for answer in (self.answers or [])}

    def to_dict(self):
        return {
            'session_id': self.session_id,
            'user_id': self.user_id,
            'level': self.level,
            'question_ids': list(self.question_ids or []),
            'answers': list(self.answers or []),
            'score': self.score,
            'status': self.status,
            'completed': self.completed,
            'created_at': _iso(self.created_at),
            'completed_at': _iso(self.completed_at),
        }

    def __repr__(self):
        return f'<QuizSession {self.session_id} {self.status}>'


class MapProgress(db.Model):
    """Per (user, map) state inside a progress tracker."""
    __tablename__ = 'user_map_progress'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), db.ForeignKey('user_progress.user_id'), nullable=False)
    map_number = db.Column(db.Integer, nullable=False)
    completed = db.Column(db.Boolean, nullable=False, default=False)
    levels_completed = db.Column(JSON, nullable=False, default=list)
    points_earned = db.Column(db.Boolean, nullable=False, default=False)

    __table_args__ = (
        db.UniqueConstraint('user_id', 'map_number', name='_user_map_progress_uc'),
    )

    def to_dict(self):
        return {
            'map_number': self.map_number,
            'completed': self.completed,
            'levels_completed': sorted(self.levels_completed or []),
            'points_earned': self.points_earned,
        }


class UserProgress(db.Model):
    """Durable per-user progression state (the progress tracker)."""
    __tablename__ = 'user_progress'

    user_id = db.Column(db.String(64), primary_key=True)
    current_level = db.Column(db.Integer, nullable=False, default=1)
    current_map = db.Column(db.Integer, nullable=False, default=1)
    completed_levels = db.Column(JSON, nullable=False, default=list)
    completed_maps = db.Column(JSON, nullable=False, default=list)
    total_score = db.Column(db.Integer, nullable=False, default=0)
    total_xp = db.Column(db.Integer, nullable=False, default=0)
    achievements = db.Column(JSON, nullable=False, default=list)

    last_played_at = db.Column(db.DateTime(timezone=True))
    last_daily_reset = db.Column(db.DateTime(timezone=True))
    streak_days = db.Column(db.Integer, nullable=False, default=0)

    # Optimistic lock: a stale concurrent write fails instead of being lost.
    version_id = db.Column(db.Integer, nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    map_progress = db.relationship(
        'MapProgress',
        collection_class=attribute_keyed_dict('map_number'),
        cascade='all, delete-orphan',
        lazy='selectin',
    )

    __mapper_args__ = {'version_id_col': version_id}

    def get_map_progress(self, map_number: int) -> MapProgress:
        """Return the map's progress, default-constructing it on first access."""
        entry = self.map_progress.get(map_number)
        if entry is None:
            entry = MapProgress(
                user_id=self.user_id,
                map_number=map_number,
                completed=False,
                levels_completed=[],
                points_earned=False,
            )
            self.map_progress[map_number] = entry
        return entry

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'current_level': self.current_level,
            'current_map': self.current_map,
            'completed_levels': sorted(self.completed_levels or []),
            'completed_maps': sorted(self.completed_maps or []),
            'map_progress': {
                str(number): entry.to_dict()
                for number, entry in sorted(self.map_progress.items())
            },
            'total_score': self.total_score,
            'total_xp': self.total_xp,
            'achievements': list(self.achievements or []),
            'last_played_at': _iso(self.last_played_at),
            'last_daily_reset': _iso(self.last_daily_reset),
            'streak_days': self.streak_days,
        }

    def __repr__(self):
        return f'<UserProgress {self.user_id} map={self.current_map} level={self.current_level}>'
