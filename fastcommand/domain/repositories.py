"""
Repository interfaces for the domain layer.

These interfaces define the contracts for settings persistence without coupling the
versioning service to a specific store. The JSON file implementation lives in
fastcommand.infrastructure.json_settings_repository.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from .models import AuditLogEntry, SettingsVersion


class SettingsRepository(ABC):
    """Repository interface for the published document, version history and audit log."""

    @abstractmethod
    def get_published(self) -> Optional[Dict[str, Any]]:
        """Return the live configuration document, or None if nothing was ever published."""
        pass

    @abstractmethod
    def set_published(self, content: Dict[str, Any]) -> None:
        """Replace the live configuration document."""
        pass

    @abstractmethod
    def list_versions(self) -> List[SettingsVersion]:
        """All versions, newest first."""
        pass

    @abstractmethod
    def prepend_version(self, version: SettingsVersion) -> SettingsVersion:
        """Atomically add a version at the head of the history."""
        pass

    @abstractmethod
    def update_version(
        self, version_id: str, mutator: Callable[[SettingsVersion], None]
    ) -> Optional[SettingsVersion]:
        """Atomically apply mutator to a stored version. Returns None if the id is unknown."""
        pass

    @abstractmethod
    def list_audit_entries(self) -> List[AuditLogEntry]:
        """All audit entries, newest first."""
        pass

    @abstractmethod
    def append_audit_entry(self, entry: AuditLogEntry) -> AuditLogEntry:
        """Atomically add an audit entry at the head of the log."""
        pass
