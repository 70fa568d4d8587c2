"""Bootstrap helpers for configuring the Flask application."""

from __future__ import annotations

import logging
from typing import Optional

from flask import Flask

from .error_handlers import register_error_handlers
from .extensions import db, login_manager, scheduler
from .logging_config import setup_logging
from .module_registry import register_modules


def configure_logging(app: Flask) -> None:
    """Configure application logging if no handlers are present."""

    setup_logging(
        app,
        log_level=app.config.get("LOG_LEVEL", "INFO"),
        log_dir=app.config.get("LOG_DIR"),
        json_format=app.config.get("LOG_JSON", False),
    )

    if app.logger.handlers:
        return

    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    app.logger.addHandler(handler)
    app.logger.propagate = False
    app.logger.info("Flask app logger configured successfully.")


def register_extensions(app: Flask) -> None:
    """Initialize shared extensions with the Flask app instance."""

    db.init_app(app)
    login_manager.init_app(app)
    register_error_handlers(app)


def register_identity_loader(app: Flask) -> None:
    """Trust the opaque user id forwarded by the upstream identity provider."""

    from ..modules.gaming.identity import Identity

    header = app.config.get("IDENTITY_HEADER", "X-User-Id")

    @login_manager.request_loader
    def load_identity_from_request(request) -> Optional[Identity]:
        user_id = (request.headers.get(header) or "").strip()
        if not user_id:
            return None
        return Identity(user_id)


def register_blueprints(app: Flask) -> None:
    """Register all default blueprints with the app."""

    mounted = register_modules(app)
    app.logger.debug("Registered %s feature modules.", mounted)


def initialize_database(app: Flask) -> None:
    """Create database tables and seed the default question catalog."""

    from ..modules.gaming import models  # noqa: F401  (register tables)

    db.create_all()

    if app.config.get("SEED_QUESTIONS_ON_STARTUP"):
        from ..modules.gaming.services.question_bank_service import QuestionBankService

        if not QuestionBankService.seed_questions():
            app.logger.info("Question catalog already present, skipping seed.")


def start_scheduler(app: Flask) -> None:
    """Register the daily progress reset job when enabled."""

    if not app.config.get("GAMING_RESET_JOB_ENABLED"):
        return

    from apscheduler.schedulers import SchedulerAlreadyRunningError
    from ..modules.gaming.tasks import run_daily_progress_reset

    try:
        scheduler.init_app(app)
        if not scheduler.running:
            scheduler.start()

        if not scheduler.get_job("gaming_daily_reset"):
            scheduler.add_job(
                id="gaming_daily_reset",
                func=run_daily_progress_reset,
                trigger="cron",
                hour=app.config.get("GAMING_RESET_JOB_HOUR", 0),
                minute=0,
                replace_existing=True,
            )
            app.logger.info("Registered gaming daily reset job.")
    except SchedulerAlreadyRunningError:
        app.logger.info("Scheduler already running, skipping re-initialization.")
