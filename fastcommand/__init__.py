"""
Flask application factory for the Fast Command settings and pricing API.
"""

import logging

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from config import Config, ensure_data_directory

logger = logging.getLogger(__name__)


def _configure_logging(app):
    """Configure Python logging level from LOG_LEVEL (default INFO)."""
    log_level_name = str(app.config.get('LOG_LEVEL', 'INFO')).upper()
    log_level = getattr(logging, log_level_name, logging.INFO)
    if not logging.getLogger().handlers:
        logging.basicConfig(
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S',
        )
    logging.getLogger().setLevel(log_level)
    app.logger.setLevel(log_level)


def _register_error_handlers(app):
    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        """Return JSON instead of HTML for HTTP errors."""
        error_code = 'not_found' if e.code == 404 else (e.name or 'error').lower().replace(' ', '_')
        return jsonify({'error': error_code, 'message': e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        app.logger.exception(f"Unhandled error on {request.method} {request.path}: {e}")
        return jsonify({'error': 'internal_error'}), 500


def create_app(config_overrides=None):
    app = Flask(__name__, static_folder=None)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    _configure_logging(app)
    app.json.ensure_ascii = False  # Arabic business names stay readable

    ensure_data_directory(app.config['DATA_DIR'])

    from .routes import register_blueprints
    register_blueprints(app)
    _register_error_handlers(app)

    app.logger.info(f"{app.config.get('SITE_NAME')} settings API ready (data dir: {app.config['DATA_DIR']})")
    return app


__all__ = ['create_app']
