# File: finquest_app/core/extensions.py
# Shared Flask extension instances, bound to the app in bootstrap.register_extensions

import sqlite3

from flask_apscheduler import APScheduler
from flask_login import LoginManager
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

db = SQLAlchemy()


@event.listens_for(Engine, "connect")
def _configure_sqlite_connection(dbapi_connection, _connection_record):
    """Concurrent readers (WAL) and a lock wait instead of instant 'database is locked'."""
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON;")
        cursor.execute("PRAGMA busy_timeout=30000;")
        # In-memory databases report 'memory' and ignore WAL
        cursor.execute("PRAGMA journal_mode=WAL;")
        cursor.execute("PRAGMA synchronous=NORMAL;")
    finally:
        cursor.close()


# Identity comes from the upstream provider; there is no login page to redirect to,
# so unauthenticated API calls get a plain 401.
login_manager = LoginManager()
login_manager.login_view = None

# Runs the daily progress reset when GAMING_RESET_JOB_ENABLED is set
scheduler = APScheduler()

__all__ = ["db", "login_manager", "scheduler"]
