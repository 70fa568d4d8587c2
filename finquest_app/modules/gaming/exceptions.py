"""Errors raised by the progression engine.

Each one is a rejected operation, never a crash: the transaction is rolled
back and the error is rendered by the app-wide ``FinQuestError`` handler.
"""

from finquest_app.core.error_handlers import (
    ConflictError,
    FinQuestError,
    NotFoundError,
    ValidationError,
)


class InsufficientContent(ConflictError):
    """The level's catalog is smaller than the requested question count."""

    def __init__(self, level: int, requested: int, available: int):
        super().__init__(
            message='No questions available for this level.',
            code='INSUFFICIENT_CONTENT',
            details={'level': level, 'requested': requested, 'available': available},
        )


class SessionNotFound(NotFoundError):

    def __init__(self, session_id: str):
        super().__init__(
            message=f'Quiz session {session_id} not found.',
            resource='quiz_session',
            code='SESSION_NOT_FOUND',
        )


class SessionClosed(ConflictError):

    def __init__(self, session_id: str):
        super().__init__(
            message=f'Quiz session {session_id} is already completed.',
            code='SESSION_CLOSED',
            details={'session_id': session_id},
        )


class QuestionNotInSession(FinQuestError):
    """The question id was not served in this session (tampering or stale client)."""

    def __init__(self, session_id: str, question_id):
        super().__init__(
            message='Question was not served in this session.',
            code='QUESTION_NOT_IN_SESSION',
            status_code=400,
            details={'session_id': session_id, 'question_id': question_id},
        )


class QuestionAlreadyAnswered(ConflictError):

    def __init__(self, session_id: str, question_id: int):
        super().__init__(
            message='Question was already answered in this session.',
            code='QUESTION_ALREADY_ANSWERED',
            details={'session_id': session_id, 'question_id': question_id},
        )


class UserProgressNotFound(NotFoundError):

    def __init__(self, user_id: str):
        super().__init__(
            message=f'No progress recorded for user {user_id}.',
            resource='user_progress',
            code='USER_PROGRESS_NOT_FOUND',
        )


class InvalidLevel(ValidationError):

    def __init__(self, level, max_level: int):
        super().__init__(
            message=f'Level must be between 1 and {max_level}.',
            errors={'level': level},
            code='INVALID_LEVEL',
        )


class ConcurrentUpdate(ConflictError):
    """Another request updated the same progress tracker first."""

    def __init__(self, user_id: str):
        super().__init__(
            message='Progress was updated concurrently, please retry.',
            code='CONCURRENT_UPDATE',
            details={'user_id': user_id},
        )
