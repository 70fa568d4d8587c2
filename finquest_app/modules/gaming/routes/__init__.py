from flask import Blueprint

gaming_api_bp = Blueprint('gaming_api', __name__)

from . import api  # noqa: E402,F401
