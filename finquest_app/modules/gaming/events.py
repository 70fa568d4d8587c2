"""
Event Handlers for the Gaming Module.

Listens to the engine's signals. Handlers only observe: the engine has
already committed by the time a signal is sent.
"""
from flask import current_app

from finquest_app.core.signals import (
    level_completed,
    map_completed,
    progress_reset,
    quiz_session_completed,
)


def on_quiz_session_completed(sender, **kwargs):
    """
    Expected kwargs:
        - user_id, session_id, level, score, passed, earned_xp, is_repeat_level
    """
    if not kwargs.get('passed'):
        current_app.logger.debug(
            f"[Gaming] User {kwargs.get('user_id')} failed level {kwargs.get('level')} "
            f"with score {kwargs.get('score')}"
        )


def on_level_completed(sender, **kwargs):
    current_app.logger.info(
        f"[Gaming] Level unlocked: user={kwargs.get('user_id')} map={kwargs.get('map_number')} "
        f"level={kwargs.get('level')} xp=+{kwargs.get('earned_xp', 0)}"
    )


def on_map_completed(sender, **kwargs):
    current_app.logger.info(
        f"[Gaming] Map {kwargs.get('map_number')} completed by user {kwargs.get('user_id')}"
    )


def on_progress_reset(sender, **kwargs):
    current_app.logger.debug(
        f"[Gaming] Reset applied: user={kwargs.get('user_id')} action={kwargs.get('action')} "
        f"streak={kwargs.get('streak_days')}"
    )


def register_events():
    """Connect signals."""
    quiz_session_completed.connect(on_quiz_session_completed)
    level_completed.connect(on_level_completed)
    map_completed.connect(on_map_completed)
    progress_reset.connect(on_progress_reset)
