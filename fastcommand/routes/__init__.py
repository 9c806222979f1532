"""
Routes package initialization.
Registers all blueprint modules for the Fast Command application.
"""

import logging
from flask import Blueprint, jsonify

logger = logging.getLogger(__name__)

from .settings_routes import settings_bp
from .commerce_routes import commerce_bp

# Main blueprint for app-level endpoints
main_bp = Blueprint('main', __name__)


@main_bp.route('/health')
def health():
    return jsonify({'status': 'ok'})


def register_blueprints(app):
    """Register all blueprints with the Flask app."""
    app.register_blueprint(main_bp)
    app.register_blueprint(settings_bp)
    app.register_blueprint(commerce_bp)
    logger.debug("Registered blueprints: main, settings, commerce")


__all__ = ['register_blueprints', 'main_bp', 'settings_bp', 'commerce_bp']
