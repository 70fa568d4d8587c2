"""Utility helpers for working with the SQLAlchemy session.

SQLite places a write lock on the database for the duration of a transaction
which can surface as a ``database is locked`` error when two requests touch
the database at roughly the same time.  :func:`run_in_transaction` re-runs a
unit of work with exponential backoff so short lived locks are retried
transparently, and rolls the session back on every other failure so that a
rejected operation never leaves half-applied changes behind.
"""

from __future__ import annotations

import time
from typing import Callable, TypeVar

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm.session import Session

T = TypeVar("T")

LOCKED_MESSAGES = {"database is locked", "database is busy"}


def _is_lock_error(error: OperationalError) -> bool:
    """Return ``True`` if the OperationalError was caused by a lock."""

    message = str(error).lower()
    return any(token in message for token in LOCKED_MESSAGES)


def run_in_transaction(
    session: Session,
    work: Callable[[], T],
    retries: int = 5,
    initial_delay: float = 0.1,
    conflict_retries: int = 0,
) -> T:
    """Run ``work`` and commit, as one all-or-nothing unit.

    Args:
        session: The SQLAlchemy session the work writes through.
        work: Callable doing the reads and writes. It must load everything it
            touches itself, because it is called again from scratch on retry.
        retries: Maximum number of attempts when SQLite reports a lock.
        initial_delay: The delay (in seconds) before the first lock retry.
            The delay is doubled after every attempt.
        conflict_retries: How many times a unique-constraint race
            (``IntegrityError``) re-runs the work. A re-run sees the row the
            competing writer inserted.

    Returns:
        Whatever ``work`` returned.

    Raises:
        OperationalError: Re-raised if the work cannot be committed after
            the configured number of retries or if the error is unrelated to
            SQLite locking.
        Exception: Any error raised by ``work`` after the session has been
            rolled back.
    """

    delay = initial_delay
    attempt = 0
    conflicts = 0
    while True:
        try:
            result = work()
            session.commit()
            return result
        except OperationalError as exc:  # pragma: no cover - retriable path
            session.rollback()
            attempt += 1
            if attempt >= retries or not _is_lock_error(exc):
                raise

            time.sleep(delay)
            delay *= 2
        except IntegrityError:
            session.rollback()
            conflicts += 1
            if conflicts > conflict_retries:
                raise
        except Exception:
            session.rollback()
            raise
