"""
Central Signal Registry for Event-Driven Architecture.

Uses blinker (Flask's signal backend) so that listeners such as
logging, notifications or analytics stay decoupled from the engine.

Usage:
    # Publisher (sender)
    from finquest_app.core.signals import level_completed
    level_completed.send(None, user_id='u1', map_number=1, level=2, earned_xp=150)

    # Subscriber (receiver) - in a module's events.py
    @level_completed.connect
    def on_level_completed(sender, **kwargs):
        ...
"""
from blinker import Namespace

gaming_signals = Namespace()

# Payload: user_id, session_id, level, question_count
quiz_session_started = gaming_signals.signal('quiz_session_started')

# Payload: user_id, session_id, question_id, is_correct, score
quiz_answer_submitted = gaming_signals.signal('quiz_answer_submitted')

# Payload: user_id, session_id, level, score, passed, earned_xp, is_repeat_level
quiz_session_completed = gaming_signals.signal('quiz_session_completed')

# Payload: user_id, map_number, level, earned_xp
level_completed = gaming_signals.signal('level_completed')

# Payload: user_id, map_number
map_completed = gaming_signals.signal('map_completed')

# Payload: user_id, action, current_map, current_level, streak_days
progress_reset = gaming_signals.signal('progress_reset')
