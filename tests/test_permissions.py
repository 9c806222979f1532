from fastcommand.utils.permissions import PERMISSION_FLAGS, allowed_systems, get_role_permissions, has_permission
from fastcommand.utils.settings_defaults import default_settings


def _document():
    return {
        'rolePermissions': {
            'Auditor': {
                'viewLogs': True,
                'systems': {'admin': {'enabled': True}, 'investment': {'enabled': False}},
            },
            'Partner': {'systems': {'investment': {'enabled': True}}},
        }
    }


def test_role_lookup_is_case_insensitive():
    permissions = get_role_permissions(_document(), 'auditor')
    assert permissions['viewLogs'] is True
    assert permissions['manageSettings'] is False
    assert set(permissions) == set(PERMISSION_FLAGS)


def test_unknown_role_has_no_permissions():
    assert not any(get_role_permissions(_document(), 'ghost').values())
    assert not any(get_role_permissions(_document(), None).values())
    assert not has_permission(_document(), 'ghost', 'viewLogs')


def test_missing_table_falls_back_to_defaults():
    assert has_permission({}, 'Admin', 'manageUsers')
    assert not has_permission({}, 'Viewer', 'manageSettings')
    assert get_role_permissions(default_settings(), 'Editor')['manageOrdersSettings'] is True


def test_builtin_role_systems():
    assert allowed_systems({}, 'admin') == {'admin': True, 'investment': True}
    assert allowed_systems({}, 'Investor') == {'admin': False, 'investment': True}
    assert allowed_systems({}, 'employee') == {'admin': True, 'investment': False}


def test_custom_role_systems_follow_enabled_flags():
    assert allowed_systems(_document(), 'Auditor') == {'admin': True, 'investment': False}
    assert allowed_systems(_document(), 'partner') == {'admin': False, 'investment': True}
    assert allowed_systems(_document(), 'nobody') == {'admin': False, 'investment': False}
