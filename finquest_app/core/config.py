# File: finquest_app/core/config.py
# Core Infrastructure Layer: application configuration

import os
from dotenv import load_dotenv

load_dotenv()

# finquest_app/core/ -> two levels up is the project root
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))

DATABASE_PATH = os.path.join(BASE_DIR, "database", "finquest.db")


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """FinQuest application configuration."""

    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        # Fallback for development, env is preferred
        SECRET_KEY = 'dev-secret-key-replace-in-production'

    SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI') or f'sqlite:///{DATABASE_PATH}'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'connect_args': {'timeout': 30},
    }
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_DIR = os.environ.get('LOG_DIR') or os.path.join(BASE_DIR, 'logs')
    LOG_JSON = _env_flag('LOG_JSON', False)

    # Seed the default question catalog when the database is empty
    SEED_QUESTIONS_ON_STARTUP = _env_flag('SEED_QUESTIONS_ON_STARTUP', True)

    # Daily progress reset job (external scheduler for the reset hook)
    GAMING_RESET_JOB_ENABLED = _env_flag('GAMING_RESET_JOB_ENABLED', False)
    GAMING_RESET_JOB_HOUR = int(os.environ.get('GAMING_RESET_JOB_HOUR', 0))
    SCHEDULER_API_ENABLED = False

    @classmethod
    def init_app(cls, app):
        """Create the directories the app writes into."""
        if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite:///'):
            os.makedirs(os.path.dirname(DATABASE_PATH), exist_ok=True)
        os.makedirs(app.config['LOG_DIR'], exist_ok=True)
