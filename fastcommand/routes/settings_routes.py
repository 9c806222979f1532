"""
Settings routes: published document, versions, validation, publish/rollback,
import/export and the audit log.
"""

import traceback

from flask import Blueprint, Response, current_app, jsonify, request

from ..services import (
    MissingContentError,
    ValidationFailedError,
    VersionNotFoundError,
    get_settings_service,
)
from ..utils.permissions import allowed_systems, get_role_permissions
from ..utils.settings_defaults import default_settings, merge_with_defaults
from ..utils.settings_validation import issues_to_dicts, validate_settings

settings_bp = Blueprint('settings', __name__, url_prefix='/settings')


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _internal_error(action: str, error: Exception):
    current_app.logger.error(f"Error {action}: {error}")
    current_app.logger.error(traceback.format_exc())
    return jsonify({'error': 'internal_error', 'message': f'Error {action}'}), 500


@settings_bp.route('', methods=['GET'])
def get_published_settings():
    """Return the live settings document ({} before the first publish)."""
    try:
        return jsonify(get_settings_service().get_published())
    except Exception as e:
        return _internal_error('loading published settings', e)


@settings_bp.route('/defaults', methods=['GET'])
def get_default_settings():
    return jsonify(default_settings())


@settings_bp.route('/versions', methods=['GET'])
def list_versions():
    try:
        versions = get_settings_service().list_versions()
        return jsonify([v.to_dict() for v in versions])
    except Exception as e:
        return _internal_error('listing settings versions', e)


@settings_bp.route('/versions', methods=['POST'])
def create_version():
    """Create a draft version from the submitted settings document."""
    data = _json_body()
    content = data.get('content')
    if content is None:
        content = data.get('settings') or {}
    try:
        version = get_settings_service().create_version(
            author=data.get('author'),
            content=content,
            message=data.get('message'),
        )
        return jsonify(version.to_dict()), 201
    except Exception as e:
        return _internal_error('creating settings version', e)


@settings_bp.route('/audit-log', methods=['GET'])
def get_audit_log():
    try:
        entries = get_settings_service().get_audit_log()
        return jsonify([entry.to_dict() for entry in entries])
    except Exception as e:
        return _internal_error('loading settings audit log', e)


@settings_bp.route('/validate', methods=['GET'])
def validate_version():
    """Validate a stored version (versionId query arg) or the published document."""
    try:
        issues = get_settings_service().validate_version(request.args.get('versionId'))
        return jsonify({'issues': issues_to_dicts(issues)})
    except Exception as e:
        return _internal_error('validating settings', e)


@settings_bp.route('/validate', methods=['POST'])
def validate_content():
    content = _json_body().get('content') or {}
    return jsonify({'issues': issues_to_dicts(validate_settings(content))})


@settings_bp.route('/versions/<version_id>/publish', methods=['PUT'])
def publish_version(version_id):
    """Publish a version; blocked with 400 when validation reports errors."""
    data = _json_body()
    try:
        version, issues = get_settings_service().publish(version_id, data.get('author'))
        return jsonify({'ok': True, 'version': version.to_dict(), 'issues': issues_to_dicts(issues)})
    except VersionNotFoundError:
        return jsonify({'error': 'version_not_found'}), 404
    except ValidationFailedError as e:
        return jsonify({'error': 'validation_failed', 'issues': issues_to_dicts(e.issues)}), 400
    except Exception as e:
        return _internal_error(f'publishing settings version {version_id}', e)


@settings_bp.route('/versions/<version_id>/rollback', methods=['POST'])
def rollback_version(version_id):
    """Re-publish an earlier version as a new version."""
    data = _json_body()
    try:
        version = get_settings_service().rollback(version_id, data.get('author'))
        return jsonify({'ok': True, 'version': version.to_dict()})
    except VersionNotFoundError:
        return jsonify({'error': 'version_not_found'}), 404
    except ValidationFailedError as e:
        return jsonify({'error': 'validation_failed', 'issues': issues_to_dicts(e.issues)}), 400
    except Exception as e:
        return _internal_error(f'rolling back to settings version {version_id}', e)


@settings_bp.route('/export', methods=['GET'])
def export_settings():
    try:
        return Response(get_settings_service().export_published(), mimetype='application/json')
    except Exception as e:
        return _internal_error('exporting settings', e)


@settings_bp.route('/import', methods=['POST'])
def import_settings():
    """Import a settings document as a new draft."""
    data = _json_body()
    try:
        version = get_settings_service().import_content(data.get('author'), data.get('content'))
        return jsonify(version.to_dict()), 201
    except MissingContentError:
        return jsonify({'error': 'missing_content'}), 400
    except Exception as e:
        return _internal_error('importing settings', e)


@settings_bp.route('/permissions/<role>', methods=['GET'])
def role_permissions(role):
    """Permission flags and system access for a role, from the live settings."""
    try:
        document = merge_with_defaults(get_settings_service().get_published())
        return jsonify({
            'role': role,
            'permissions': get_role_permissions(document, role),
            'systems': allowed_systems(document, role),
        })
    except Exception as e:
        return _internal_error(f'loading permissions for role {role}', e)
