"""
Logging setup for FinQuest.

All application loggers live under the ``finquest`` namespace, so the
handlers attached here (console plus a rotating file) also serve module
loggers such as ``finquest.gaming.tasks``.
"""

import logging
import logging.handlers
import os
from typing import Optional

ROOT_LOGGER = 'finquest'
LOG_FILE_NAME = 'finquest.log'
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
LOG_FILE_BACKUPS = 5

TEXT_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
JSON_FORMAT = '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'


def _default_log_dir() -> str:
    project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
    return os.path.join(project_root, 'logs')


def _build_handlers(log_dir: str, level: int, formatter: logging.Formatter):
    console = logging.StreamHandler()
    rotating = logging.handlers.RotatingFileHandler(
        os.path.join(log_dir, LOG_FILE_NAME),
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding='utf-8',
    )
    for handler in (console, rotating):
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return console, rotating


def setup_logging(
    app=None,
    log_level: str = 'INFO',
    log_dir: Optional[str] = None,
    json_format: bool = False,
) -> logging.Logger:
    """
    Attach console and rotating-file handlers to the ``finquest`` logger.

    Safe to call once per app instance: previous handlers are closed and
    replaced, so repeated app factories do not duplicate output.

    Args:
        app: Flask application; when given, werkzeug request logs are quieted.
        log_level: DEBUG, INFO, WARNING or ERROR.
        log_dir: Directory of ``finquest.log`` (default: ``<project>/logs``).
        json_format: One JSON object per line instead of plain text.
    """
    log_dir = log_dir or _default_log_dir()
    os.makedirs(log_dir, exist_ok=True)
    level = getattr(logging, str(log_level).upper(), logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(JSON_FORMAT if json_format else TEXT_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')
    for handler in _build_handlers(log_dir, level, formatter):
        logger.addHandler(handler)

    if app is not None:
        logging.getLogger('werkzeug').setLevel(logging.WARNING)

    logger.debug(f"Logging initialized: level={log_level}, dir={log_dir}")
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger in the ``finquest`` namespace, e.g. ``get_logger('gaming')``."""
    if not name or name == ROOT_LOGGER:
        return logging.getLogger(ROOT_LOGGER)
    if name.startswith(ROOT_LOGGER + '.'):
        return logging.getLogger(name)
    return logging.getLogger(f'{ROOT_LOGGER}.{name}')
