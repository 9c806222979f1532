from .json_document_store import JsonDocumentStore
from .json_settings_repository import JsonSettingsRepository

__all__ = ['JsonDocumentStore', 'JsonSettingsRepository']
