"""
Settings Versioning Service

Owns the lifecycle of the business settings document: drafts, validation-gated
publishing, rollback to earlier snapshots, import/export and the audit trail.
It is the only writer of the settings repository; history and audit log are
append-only.
"""

import copy
import json
import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

from ..domain.models import (
    AuditEventType,
    AuditLogEntry,
    SettingsVersion,
    ValidationIssue,
    VersionStatus,
    normalize_author,
    now_iso,
)
from ..domain.repositories import SettingsRepository
from ..utils.settings_diff import change_topics, diff_documents
from ..utils.settings_validation import has_blocking_issues, validate_settings

logger = logging.getLogger(__name__)

DEFAULT_VERSION_MESSAGE = "Update settings"
IMPORT_MESSAGE = "Import settings"


class SettingsError(Exception):
    """Base class for settings workflow failures."""


class VersionNotFoundError(SettingsError):
    """Raised when a referenced version id does not exist."""
    def __init__(self, version_id: str):
        self.version_id = version_id
        super().__init__(f"Settings version not found: {version_id}")


class ValidationFailedError(SettingsError):
    """Raised when content with error-level issues would become live."""
    def __init__(self, issues: List[ValidationIssue], version_id: Optional[str] = None):
        self.issues = list(issues)
        self.version_id = version_id
        super().__init__(f"Settings validation failed with {len(self.issues)} issue(s)")


class MissingContentError(SettingsError):
    """Raised when an import carries no settings document."""
    def __init__(self, message: str = "Import requires a settings document"):
        super().__init__(message)


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


class SettingsVersioningService:
    """Draft -> validate -> publish -> rollback workflow over an injected repository."""

    def __init__(self, repository: SettingsRepository, validate_on_rollback: bool = False):
        self.repository = repository
        self.validate_on_rollback = validate_on_rollback

    # ------------------------------------------------------------------ reads
    def get_published(self) -> Dict[str, Any]:
        return self.repository.get_published() or {}

    def list_versions(self) -> List[SettingsVersion]:
        return self.repository.list_versions()

    def get_version(self, version_id: str) -> Optional[SettingsVersion]:
        return next((v for v in self.repository.list_versions() if v.id == version_id), None)

    def get_audit_log(self) -> List[AuditLogEntry]:
        return self.repository.list_audit_entries()

    def export_published(self) -> str:
        """The live document as indented JSON text, {} if nothing was published yet."""
        return json.dumps(self.get_published(), indent=2, ensure_ascii=False)

    def validate_version(self, version_id: Optional[str] = None) -> List[ValidationIssue]:
        """Issues for a version's content, or for the live document when no (known) id is given."""
        content = self.get_published()
        if version_id:
            version = self.get_version(version_id)
            if version is not None:
                content = version.content
        return validate_settings(content)

    # ----------------------------------------------------------------- writes
    def create_version(self, author: Any, content: Any, message: Optional[str] = None) -> SettingsVersion:
        """Store content as a draft. Drafts are never validated; only publishing is gated."""
        author = normalize_author(author)
        content = copy.deepcopy(content) if isinstance(content, dict) else {}
        version = self._new_version(author, content, message or DEFAULT_VERSION_MESSAGE, VersionStatus.DRAFT)
        self.repository.prepend_version(version)
        self._audit(AuditEventType.VERSION_CREATED, author, {
            "versionId": version.id,
            "message": version.message,
            "diffs": [d.to_dict() for d in version.diffs],
            "topics": change_topics(version.diffs),
        }, created_at=version.created_at)
        logger.info(f"Created settings draft {version.id} ({len(version.diffs)} changed section(s))")
        return version

    def import_content(self, author: Any, content: Any) -> SettingsVersion:
        """Create a draft from an imported document. Never publishes.

        An empty object is a valid (if useless) document; only a missing or
        non-object payload is rejected.
        """
        if not isinstance(content, dict):
            raise MissingContentError()
        author = normalize_author(author)
        version = self._new_version(author, copy.deepcopy(content), IMPORT_MESSAGE, VersionStatus.DRAFT)
        self.repository.prepend_version(version)
        self._audit(AuditEventType.IMPORT, author, {"versionId": version.id}, created_at=version.created_at)
        logger.info(f"Imported settings as draft {version.id}")
        return version

    def publish(self, version_id: str, author: Any = None) -> Tuple[SettingsVersion, List[ValidationIssue]]:
        """Make a version live if its content has no error-level issues."""
        version = self.get_version(version_id)
        if version is None:
            raise VersionNotFoundError(version_id)

        issues = validate_settings(version.content)
        if has_blocking_issues(issues):
            logger.warning(f"Publish of {version_id} blocked by {len(issues)} validation issue(s)")
            raise ValidationFailedError(issues, version_id)

        published_at = now_iso()

        def _mark_published(stored: SettingsVersion) -> None:
            stored.status = VersionStatus.PUBLISHED
            stored.published_at = published_at

        updated = self.repository.update_version(version_id, _mark_published)
        if updated is None:
            raise VersionNotFoundError(version_id)
        self.repository.set_published(updated.content)
        self._audit(AuditEventType.VERSION_PUBLISHED, normalize_author(author), {
            "versionId": version_id,
            "diffs": [d.to_dict() for d in updated.diffs],
        }, created_at=published_at)
        logger.info(f"Published settings version {version_id}")
        return updated, issues

    def rollback(self, version_id: str, author: Any = None) -> SettingsVersion:
        """Re-publish an earlier snapshot as a brand-new version; history is not rewritten."""
        target = self.get_version(version_id)
        if target is None:
            raise VersionNotFoundError(version_id)

        if self.validate_on_rollback:
            issues = validate_settings(target.content)
            if has_blocking_issues(issues):
                logger.warning(f"Rollback to {version_id} blocked by {len(issues)} validation issue(s)")
                raise ValidationFailedError(issues, version_id)

        author = normalize_author(author)
        version = self._new_version(
            author, copy.deepcopy(target.content), f"Rollback to {version_id}", VersionStatus.PUBLISHED
        )
        version.published_at = version.created_at
        self.repository.prepend_version(version)
        self.repository.set_published(version.content)
        self._audit(AuditEventType.VERSION_ROLLBACK, author, {
            "fromVersion": version_id,
            "toVersion": version.id,
        }, created_at=version.created_at)
        logger.info(f"Rolled back settings to {version_id} as {version.id}")
        return version

    # ---------------------------------------------------------------- helpers
    def _new_version(
        self, author: Dict[str, Any], content: Dict[str, Any], message: str, status: VersionStatus
    ) -> SettingsVersion:
        return SettingsVersion(
            id=_new_id("v"),
            created_at=now_iso(),
            author=author,
            status=status,
            message=message,
            content=content,
            diffs=diff_documents(self.get_published(), content),
        )

    def _audit(
        self, event_type: AuditEventType, user: Dict[str, Any], details: Dict[str, Any], created_at: Optional[str] = None
    ) -> AuditLogEntry:
        entry = AuditLogEntry(
            id=_new_id("a"),
            type=event_type,
            user=user,
            created_at=created_at or now_iso(),
            details=details,
        )
        return self.repository.append_audit_entry(entry)


__all__ = [
    "SettingsError",
    "VersionNotFoundError",
    "ValidationFailedError",
    "MissingContentError",
    "SettingsVersioningService",
]
