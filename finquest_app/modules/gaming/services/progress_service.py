# File: finquest_app/modules/gaming/services/progress_service.py
"""
Progress Service
================
The durable per-user progress tracker: current level and map, completed
sets, XP/score totals and the daily reset hook.
"""

from datetime import datetime, timezone
from typing import List, Optional

from flask import current_app
from sqlalchemy.orm.exc import StaleDataError

from finquest_app.core.extensions import db
from finquest_app.core.signals import progress_reset
from finquest_app.utils.db_session import run_in_transaction

from ..config import DEFAULT_MAP_TOPIC, MAP_TOPICS
from ..exceptions import ConcurrentUpdate, UserProgressNotFound
from ..logics import achievement_logic
from ..logics.progression_logic import LevelOutcome, is_map_complete
from ..logics.reset_logic import decide_reset
from ..models import UserProgress
from ..schemas import ResetResultDTO
from .gaming_config_service import GamingConfigService


class ProgressService:
    """Service for reading and mutating progress trackers."""

    @staticmethod
    def get_progress(user_id: str) -> Optional[UserProgress]:
        return db.session.get(UserProgress, user_id)

    @staticmethod
    def require_progress(user_id: str) -> UserProgress:
        """Read path that must not default-create the tracker."""
        progress = ProgressService.get_progress(user_id)
        if progress is None:
            raise UserProgressNotFound(user_id)
        return progress

    @staticmethod
    def get_or_create_progress(user_id: str) -> UserProgress:
        """Get the tracker, adding a default one to the session if absent."""
        progress = db.session.get(UserProgress, user_id)
        if not progress:
            progress = UserProgress(
                user_id=user_id,
                current_level=1,
                current_map=1,
                completed_levels=[],
                completed_maps=[],
                total_score=0,
                total_xp=0,
                achievements=[],
                streak_days=0,
            )
            db.session.add(progress)
        return progress

    @staticmethod
    def ensure_progress(user_id: str) -> UserProgress:
        """Get or create the tracker and persist it."""
        return run_in_transaction(
            db.session,
            lambda: ProgressService.get_or_create_progress(user_id),
            conflict_retries=1,
        )

    @staticmethod
    def apply_credit(
        progress: UserProgress,
        level: int,
        score: int,
        outcome: LevelOutcome,
        now: Optional[datetime] = None,
    ) -> List[str]:
        """
        Apply a first-time level completion to the tracker.

        Returns:
            Achievement keys newly earned by this completion.
        """
        now = now or datetime.now(timezone.utc)
        map_number = progress.current_map

        entry = progress.get_map_progress(map_number)
        entry.levels_completed = list(outcome.levels_completed)
        entry.points_earned = True
        if outcome.is_map_completed:
            entry.completed = True
            if map_number not in (progress.completed_maps or []):
                progress.completed_maps = sorted(set(progress.completed_maps or []) | {map_number})

        progress.completed_levels = sorted(set(progress.completed_levels or []) | {level})
        progress.total_xp = (progress.total_xp or 0) + outcome.earned_xp
        progress.total_score = (progress.total_score or 0) + score
        progress.current_level = outcome.next_level
        progress.last_played_at = now

        new_achievements = achievement_logic.evaluate_achievements(
            progress.achievements,
            credited_level=True,
            perfect_score=outcome.is_perfect,
            map_completed=outcome.is_map_completed,
            total_xp=progress.total_xp,
            streak_days=progress.streak_days or 0,
            xp_milestone=GamingConfigService.get_config('ACHIEVEMENT_XP_MILESTONE'),
            streak_target=GamingConfigService.get_config('ACHIEVEMENT_STREAK_DAYS'),
        )
        if new_achievements:
            progress.achievements = list(progress.achievements or []) + new_achievements
        return new_achievements

    @staticmethod
    def reset_if_due(user_id: str, now: Optional[datetime] = None) -> ResetResultDTO:
        """
        Daily reset hook, called synchronously by an external scheduler.

        Runs at most once per UTC calendar day; a second call in the same day
        is a no-op.
        """
        now = now or datetime.now(timezone.utc)
        max_levels = GamingConfigService.get_config('MAX_LEVELS_PER_MAP')
        max_maps = GamingConfigService.get_config('MAX_MAPS')

        def _work():
            progress = ProgressService.get_or_create_progress(user_id)
            entry = progress.map_progress.get(progress.current_map)
            map_completed = bool(entry) and is_map_complete(entry.levels_completed or [], max_levels)

            decision = decide_reset(
                now=now,
                last_daily_reset=progress.last_daily_reset,
                current_map=progress.current_map,
                current_level=progress.current_level,
                map_completed=map_completed,
                streak_days=progress.streak_days,
                last_played_at=progress.last_played_at,
                max_maps=max_maps,
            )
            if not decision.is_due:
                return progress, decision, []

            if decision.clear_map_cycle:
                cycle = progress.get_map_progress(decision.current_map)
                cycle.levels_completed = []
                cycle.points_earned = False
                cycle.completed = False

            progress.current_map = decision.current_map
            progress.current_level = decision.current_level
            progress.streak_days = decision.streak_days
            progress.last_daily_reset = now

            new_achievements = achievement_logic.evaluate_achievements(
                progress.achievements,
                streak_days=decision.streak_days,
                total_xp=progress.total_xp or 0,
                xp_milestone=GamingConfigService.get_config('ACHIEVEMENT_XP_MILESTONE'),
                streak_target=GamingConfigService.get_config('ACHIEVEMENT_STREAK_DAYS'),
            )
            if new_achievements:
                progress.achievements = list(progress.achievements or []) + new_achievements
            return progress, decision, new_achievements

        try:
            progress, decision, new_achievements = run_in_transaction(
                db.session, _work, conflict_retries=1
            )
        except StaleDataError:
            raise ConcurrentUpdate(user_id)

        if decision.is_due:
            current_app.logger.info(
                f"[Gaming] Daily reset for user={user_id}: {decision.action} "
                f"(map={decision.current_map}, level={decision.current_level})"
            )
            progress_reset.send(
                None,
                user_id=user_id,
                action=decision.action,
                current_map=progress.current_map,
                current_level=progress.current_level,
                streak_days=progress.streak_days,
            )

        return ResetResultDTO(
            action=decision.action,
            current_map=progress.current_map,
            current_level=progress.current_level,
            streak_days=progress.streak_days or 0,
            last_daily_reset=progress.last_daily_reset.isoformat() if progress.last_daily_reset else None,
            new_achievements=new_achievements,
        )

    @staticmethod
    def get_progress_snapshot(user_id: str) -> dict:
        """Progress for display, creating the default tracker on first access."""
        progress = ProgressService.ensure_progress(user_id)
        data = progress.to_dict()
        data['map_topic'] = MAP_TOPICS.get(progress.current_map, DEFAULT_MAP_TOPIC)
        data['achievement_details'] = [
            {'key': key, 'description': achievement_logic.ACHIEVEMENT_DESCRIPTIONS.get(key, key)}
            for key in data['achievements']
        ]
        return data

    @staticmethod
    def list_user_ids() -> List[str]:
        return [row.user_id for row in db.session.query(UserProgress.user_id).all()]
