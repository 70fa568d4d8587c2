# modules/gaming/services/gaming_config_service.py
from typing import Any, Dict

from flask import current_app, has_app_context

from ..config import GamingDefaultConfig
from ..logics.progression_logic import ProgressionRules


class GamingConfigService:
    """
    Resolves gaming settings.
    Fallback chain: Flask app config -> GamingDefaultConfig.
    """

    @staticmethod
    def get_config(key: str) -> int:
        """Get a single config value."""
        if has_app_context():
            app_val = current_app.config.get(f'GAMING_{key}')
            if app_val is not None:
                return app_val
        return getattr(GamingDefaultConfig, key, 0)

    @staticmethod
    def get_rules() -> ProgressionRules:
        return ProgressionRules.from_config(GamingConfigService.get_config)

    @staticmethod
    def get_all_configs() -> Dict[str, Dict[str, Any]]:
        """All gaming settings with their effective and default values."""
        keys = [name for name in vars(GamingDefaultConfig) if name.isupper()]
        return {
            key: {
                'value': GamingConfigService.get_config(key),
                'default': getattr(GamingDefaultConfig, key),
            }
            for key in keys
        }
