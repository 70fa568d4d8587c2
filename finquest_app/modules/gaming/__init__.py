# File: finquest_app/modules/gaming/__init__.py
"""Gaming module: quiz sessions, answer ledger and map/level progression."""

from .routes import gaming_api_bp

# Module Metadata
module_metadata = {
    'name': 'Financial Literacy Quest',
    'icon': 'map',
    'category': 'Learning',
    'url_prefix': '/api/gaming',
    'enabled': True,
}


def setup_module(app):
    """Standard module setup."""
    from .events import register_events
    register_events()

    app.logger.info("Gaming Module Initialized.")
