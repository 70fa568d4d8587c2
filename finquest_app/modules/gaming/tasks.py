"""Scheduled jobs of the gaming module (run by Flask-APScheduler)."""

from datetime import datetime, timezone
from typing import Dict, Optional

from finquest_app.core.error_handlers import FinQuestError
from finquest_app.core.extensions import scheduler
from finquest_app.core.logging_config import get_logger

from .services.progress_service import ProgressService
from .services.quiz_session_service import QuizSessionService

logger = get_logger('gaming.tasks')

STALE_SESSION_DAYS = 30


def reset_all_progress(now: Optional[datetime] = None) -> Dict[str, int]:
    """
    Apply the daily reset hook to every tracker. Requires an app context.

    Returns:
        Count of trackers per reset action, plus ``failed``.
    """
    now = now or datetime.now(timezone.utc)
    summary = {'failed': 0}

    for user_id in ProgressService.list_user_ids():
        try:
            result = ProgressService.reset_if_due(user_id, now=now)
        except FinQuestError as e:
            logger.warning(f"[Gaming] Daily reset skipped for user {user_id}: {e.code}")
            summary['failed'] += 1
            continue
        except Exception as e:
            logger.error(f"[Gaming] Daily reset failed for user {user_id}: {e}", exc_info=True)
            summary['failed'] += 1
            continue
        summary[result.action] = summary.get(result.action, 0) + 1

    summary['purged_sessions'] = QuizSessionService.purge_stale_sessions(STALE_SESSION_DAYS, now=now)
    logger.info(f"[Gaming] Daily reset finished: {summary}")
    return summary


def run_daily_progress_reset(app=None):
    """Scheduler entry point: runs the daily reset inside an app context."""
    app = app or scheduler.app
    with app.app_context():
        return reset_all_progress()
