import json

import pytest

from fastcommand.domain.models import AuditEventType, VersionStatus
from fastcommand.services import (
    MissingContentError,
    ValidationFailedError,
    VersionNotFoundError,
    build_settings_service,
)

ADMIN = {'id': 'u1', 'name': 'Admin'}


def test_nothing_published_initially(service):
    assert service.get_published() == {}
    assert service.export_published() == '{}'
    assert service.list_versions() == []
    assert service.get_audit_log() == []


def test_create_version_is_a_draft_with_diffs(service, valid_settings):
    version = service.create_version(ADMIN, valid_settings, 'First cut')

    assert version.id.startswith('v_')
    assert version.status is VersionStatus.DRAFT
    assert version.author == ADMIN
    assert version.message == 'First cut'
    assert sorted(d.key for d in version.diffs) == sorted(valid_settings.keys())
    assert all(d.old is None for d in version.diffs)
    # drafts do not go live
    assert service.get_published() == {}


def test_create_version_defaults_message_and_author(service):
    version = service.create_version(None, {'general': {}})
    assert version.message == 'Update settings'
    assert version.author == {'id': 'system', 'name': 'system'}


def test_drafts_are_not_validated(service, valid_settings):
    valid_settings['currencies']['rates']['USD'] = 0
    version = service.create_version(ADMIN, valid_settings)
    assert service.get_version(version.id) is not None


def test_publish_makes_content_live(service, valid_settings):
    version = service.create_version(ADMIN, valid_settings)
    published, issues = service.publish(version.id, ADMIN)

    assert issues == []
    assert published.status is VersionStatus.PUBLISHED
    assert published.published_at
    assert service.get_published() == valid_settings
    assert json.loads(service.export_published()) == valid_settings
    assert service.get_version(version.id).is_published


def test_publish_with_errors_changes_nothing(service, valid_settings):
    first = service.create_version(ADMIN, valid_settings)
    service.publish(first.id, ADMIN)

    broken = json.loads(json.dumps(valid_settings))
    broken['currencies']['rates']['USD'] = 0
    draft = service.create_version(ADMIN, broken)
    audit_before = len(service.get_audit_log())

    with pytest.raises(ValidationFailedError) as excinfo:
        service.publish(draft.id, ADMIN)

    assert [issue.path for issue in excinfo.value.issues] == ['currencies.rates.USD']
    assert service.get_published() == valid_settings
    assert service.get_version(draft.id).status is VersionStatus.DRAFT
    assert len(service.get_audit_log()) == audit_before


def test_publish_unknown_version(service):
    with pytest.raises(VersionNotFoundError):
        service.publish('v_missing')


def test_diff_is_against_published_document(service, valid_settings):
    first = service.create_version(ADMIN, valid_settings)
    service.publish(first.id, ADMIN)

    changed = json.loads(json.dumps(valid_settings))
    changed['delivery']['courierProfitPercent'] = 25
    second = service.create_version(ADMIN, changed)

    assert [d.key for d in second.diffs] == ['delivery']
    assert second.diffs[0].old == {'courierProfitPercent': 20}
    assert second.diffs[0].new == {'courierProfitPercent': 25}


def test_identical_content_has_no_diffs(service, valid_settings):
    first = service.create_version(ADMIN, valid_settings)
    service.publish(first.id, ADMIN)
    again = service.create_version(ADMIN, json.loads(json.dumps(valid_settings)))
    assert again.diffs == []


def test_rollback_creates_new_published_version(service, valid_settings):
    v1 = service.create_version(ADMIN, valid_settings)
    service.publish(v1.id, ADMIN)

    changed = json.loads(json.dumps(valid_settings))
    changed['ordersInvoices']['defaultCommissionPercent'] = 7
    v2 = service.create_version(ADMIN, changed)
    service.publish(v2.id, ADMIN)

    restored = service.rollback(v1.id, ADMIN)

    assert restored.id not in (v1.id, v2.id)
    assert restored.status is VersionStatus.PUBLISHED
    assert restored.message == f'Rollback to {v1.id}'
    assert restored.content == v1.content
    assert service.get_published() == valid_settings
    # history is not rewritten
    assert [v.id for v in service.list_versions()] == [restored.id, v2.id, v1.id]
    assert service.get_version(v2.id).is_published


def test_rollback_unknown_version(service):
    with pytest.raises(VersionNotFoundError):
        service.rollback('v_missing', ADMIN)


def test_rollback_skips_validation_by_default(service, valid_settings):
    broken = json.loads(json.dumps(valid_settings))
    broken['currencies']['rates']['USD'] = 0
    draft = service.create_version(ADMIN, broken)

    restored = service.rollback(draft.id, ADMIN)
    assert service.get_published() == broken
    assert restored.is_published


def test_rollback_validation_can_be_enabled(data_dir, valid_settings):
    service = build_settings_service(data_dir, validate_on_rollback=True)
    broken = json.loads(json.dumps(valid_settings))
    broken['currencies']['rates']['USD'] = 0
    draft = service.create_version(ADMIN, broken)

    with pytest.raises(ValidationFailedError):
        service.rollback(draft.id, ADMIN)
    assert service.get_published() == {}


def test_import_creates_draft_only(service, valid_settings):
    version = service.import_content(ADMIN, valid_settings)

    assert version.status is VersionStatus.DRAFT
    assert version.message == 'Import settings'
    assert service.get_published() == {}
    assert service.get_audit_log()[0].type is AuditEventType.IMPORT
    assert service.get_audit_log()[0].details == {'versionId': version.id}


def test_import_accepts_empty_document(service):
    version = service.import_content(ADMIN, {})

    assert version.content == {}
    assert version.diffs == []
    assert service.get_audit_log()[0].type is AuditEventType.IMPORT


def test_publish_with_only_warnings_goes_live(service, valid_settings, monkeypatch):
    from fastcommand.domain.models import IssueSeverity, ValidationIssue
    from fastcommand.services import settings_versioning_service

    warning = ValidationIssue('shipping.types', 'Check transit days', IssueSeverity.WARNING)
    monkeypatch.setattr(settings_versioning_service, 'validate_settings', lambda content: [warning])

    version = service.create_version(ADMIN, valid_settings)
    published, issues = service.publish(version.id, ADMIN)

    assert issues == [warning]
    assert published.is_published
    assert service.get_published() == valid_settings


@pytest.mark.parametrize('content', [None, [], 'settings', 42])
def test_import_requires_content(service, content):
    with pytest.raises(MissingContentError):
        service.import_content(ADMIN, content)
    assert service.list_versions() == []
    assert service.get_audit_log() == []


def test_audit_log_is_newest_first(service, valid_settings):
    v1 = service.create_version(ADMIN, valid_settings, 'initial')
    service.publish(v1.id, ADMIN)
    v2 = service.create_version(ADMIN, {'general': {'businessName': 'FC'}})
    service.rollback(v1.id, ADMIN)

    log = service.get_audit_log()
    assert [entry.type for entry in log] == [
        AuditEventType.VERSION_ROLLBACK,
        AuditEventType.VERSION_CREATED,
        AuditEventType.VERSION_PUBLISHED,
        AuditEventType.VERSION_CREATED,
    ]
    assert all(entry.id.startswith('a_') for entry in log)
    assert log[0].details['fromVersion'] == v1.id
    assert log[0].details['toVersion'] == service.list_versions()[0].id
    assert log[1].details['versionId'] == v2.id
    assert log[2].details['versionId'] == v1.id
    assert log[3].details['message'] == 'initial'
    assert log[3].user == ADMIN


def test_created_audit_entry_lists_change_topics(service, valid_settings):
    service.create_version(ADMIN, valid_settings)
    topics = service.get_audit_log()[0].details['topics']
    assert topics == [
        'settings.currencies.changed',
        'settings.shipping.changed',
        'settings.commissions.changed',
    ]


def test_validate_version_defaults_to_published(service, valid_settings):
    broken = json.loads(json.dumps(valid_settings))
    broken['delivery']['courierProfitPercent'] = 200
    draft = service.create_version(ADMIN, broken)

    assert [i.path for i in service.validate_version(draft.id)] == ['delivery.courierProfitPercent']
    assert service.validate_version() == []
    assert service.validate_version('v_unknown') == []


def test_state_survives_a_new_service_instance(data_dir, service, valid_settings):
    version = service.create_version(ADMIN, valid_settings)
    service.publish(version.id, ADMIN)

    reopened = build_settings_service(data_dir)
    assert reopened.get_published() == valid_settings
    assert reopened.get_version(version.id).to_dict() == service.get_version(version.id).to_dict()
