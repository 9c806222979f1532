"""JSON file implementation of SettingsRepository."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from ..domain.models import AuditLogEntry, SettingsVersion
from ..domain.repositories import SettingsRepository
from .json_document_store import JsonDocumentStore

logger = logging.getLogger(__name__)

PUBLISHED_DOCUMENT = "published_settings"
VERSIONS_DOCUMENT = "settings_versions"
AUDIT_DOCUMENT = "settings_audit_log"


class JsonSettingsRepository(SettingsRepository):
    """Three independent documents: published content, versions and audit log (newest first)."""

    def __init__(self, store: JsonDocumentStore):
        self.store = store

    def get_published(self) -> Optional[Dict[str, Any]]:
        data = self.store.read(PUBLISHED_DOCUMENT, None)
        return data if isinstance(data, dict) else None

    def set_published(self, content: Dict[str, Any]) -> None:
        self.store.write(PUBLISHED_DOCUMENT, content)

    def list_versions(self) -> List[SettingsVersion]:
        raw = self.store.read(VERSIONS_DOCUMENT, [])
        return [SettingsVersion.from_dict(v) for v in raw or [] if isinstance(v, dict) and v.get("id")]

    def prepend_version(self, version: SettingsVersion) -> SettingsVersion:
        def _prepend(versions):
            versions = versions if isinstance(versions, list) else []
            versions.insert(0, version.to_dict())
            return versions, version

        return self.store.update(VERSIONS_DOCUMENT, [], _prepend)

    def update_version(
        self, version_id: str, mutator: Callable[[SettingsVersion], None]
    ) -> Optional[SettingsVersion]:
        def _update(versions):
            versions = versions if isinstance(versions, list) else []
            for index, raw in enumerate(versions):
                if isinstance(raw, dict) and raw.get("id") == version_id:
                    version = SettingsVersion.from_dict(raw)
                    mutator(version)
                    versions[index] = version.to_dict()
                    return versions, version
            return versions, None

        return self.store.update(VERSIONS_DOCUMENT, [], _update)

    def list_audit_entries(self) -> List[AuditLogEntry]:
        raw = self.store.read(AUDIT_DOCUMENT, [])
        entries = []
        for item in raw or []:
            try:
                entries.append(AuditLogEntry.from_dict(item))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Skipping unreadable audit entry: {e}")
        return entries

    def append_audit_entry(self, entry: AuditLogEntry) -> AuditLogEntry:
        def _append(entries):
            entries = entries if isinstance(entries, list) else []
            entries.insert(0, entry.to_dict())
            return entries, entry

        return self.store.update(AUDIT_DOCUMENT, [], _append)


__all__ = [
    "JsonSettingsRepository",
    "PUBLISHED_DOCUMENT",
    "VERSIONS_DOCUMENT",
    "AUDIT_DOCUMENT",
]
