"""
Services Package

- SettingsVersioningService: draft/publish/rollback workflow and audit log
- quote_order: order pricing against the live settings

Service instances are created lazily, one per Flask app, and cached in app.extensions.
"""

from flask import current_app

from ..infrastructure.json_document_store import JsonDocumentStore
from ..infrastructure.json_settings_repository import JsonSettingsRepository
from .pricing_service import quote_order
from .settings_versioning_service import (
    MissingContentError,
    SettingsError,
    SettingsVersioningService,
    ValidationFailedError,
    VersionNotFoundError,
)

_EXTENSION_KEY = 'fastcommand.settings_service'


def build_settings_service(data_dir, validate_on_rollback: bool = False) -> SettingsVersioningService:
    """Wire the versioning service to the JSON store under data_dir."""
    repository = JsonSettingsRepository(JsonDocumentStore(data_dir))
    return SettingsVersioningService(repository, validate_on_rollback=validate_on_rollback)


def get_settings_service() -> SettingsVersioningService:
    """Get the settings service for the current app with lazy initialization."""
    app = current_app._get_current_object()  # type: ignore[attr-defined]
    service = app.extensions.get(_EXTENSION_KEY)
    if service is None:
        service = build_settings_service(
            app.config['DATA_DIR'],
            validate_on_rollback=bool(app.config.get('SETTINGS_VALIDATE_ON_ROLLBACK', False)),
        )
        app.extensions[_EXTENSION_KEY] = service
    return service


__all__ = [
    'MissingContentError',
    'SettingsError',
    'SettingsVersioningService',
    'ValidationFailedError',
    'VersionNotFoundError',
    'build_settings_service',
    'get_settings_service',
    'quote_order',
]
