"""Declarative registry of the application's feature modules.

A feature module is a package exposing a blueprint, an optional
``module_metadata`` dict and an optional ``setup_module(app)`` hook.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import ModuleType
from typing import Iterable, Optional

from flask import Blueprint, Flask
from werkzeug.utils import import_string


@dataclass(frozen=True)
class ModuleDefinition:
    """Where a feature module lives and where its blueprint is mounted."""

    import_path: str
    blueprint_name: str
    url_prefix: Optional[str] = None

    def load(self) -> ModuleType:
        return import_string(self.import_path)

    def is_enabled(self, package: ModuleType) -> bool:
        metadata = getattr(package, "module_metadata", None) or {}
        return bool(metadata.get("enabled", True))

    def register(self, app: Flask) -> bool:
        """Run the module's setup hook and mount its blueprint.

        Returns:
            False when the module's metadata disables it.
        """

        package = self.load()
        if not self.is_enabled(package):
            app.logger.info("Module %s is disabled, skipping.", self.import_path)
            return False

        setup_module = getattr(package, "setup_module", None)
        if callable(setup_module):
            setup_module(app)

        blueprint = getattr(package, self.blueprint_name, None)
        if not isinstance(blueprint, Blueprint):
            raise TypeError(
                "Module '%s' has no blueprint named '%s' (found %r)"
                % (self.import_path, self.blueprint_name, type(blueprint))
            )
        app.register_blueprint(blueprint, url_prefix=self.url_prefix)
        app.logger.debug("Mounted %s at %s", self.import_path, self.url_prefix or "/")
        return True


DEFAULT_MODULES: Iterable[ModuleDefinition] = (
    ModuleDefinition("finquest_app.modules.gaming", "gaming_api_bp", url_prefix="/api/gaming"),
)


def register_modules(app: Flask, modules: Iterable[ModuleDefinition] = DEFAULT_MODULES) -> int:
    """Register every enabled module and return how many were mounted."""

    return sum(1 for module in modules if module.register(app))
