"""Role permission lookups against the settings document.

Lookups only: nothing here enforces access, callers decide what to do with the answer.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from .settings_defaults import DEFAULT_SETTINGS

PERMISSION_FLAGS = (
    "manageSettings",
    "viewLogs",
    "manageUsers",
    "approveWithdrawals",
    "manageOrdersSettings",
    "manageShipmentsSettings",
)

# Built-in roles with fixed access to the admin and investment systems.
_BUILTIN_SYSTEMS = {
    "admin": {"admin": True, "investment": True},
    "investor": {"admin": False, "investment": True},
    "employee": {"admin": True, "investment": False},
}


def _role_table(document: Any) -> Dict[str, Any]:
    table = document.get("rolePermissions") if isinstance(document, dict) else None
    if not isinstance(table, dict):
        table = DEFAULT_SETTINGS["rolePermissions"]
    return table


def _find_role_entry(document: Any, role: Optional[str]) -> Dict[str, Any]:
    if not role:
        return {}
    table = _role_table(document)
    entry = table.get(role)
    if entry is None:
        wanted = role.strip().lower()
        entry = next((v for k, v in table.items() if str(k).strip().lower() == wanted), None)
    return entry if isinstance(entry, dict) else {}


def get_role_permissions(document: Any, role: Optional[str]) -> Dict[str, bool]:
    """Permission flags for a role; unknown roles get every flag False."""
    entry = _find_role_entry(document, role)
    return {flag: bool(entry.get(flag, False)) for flag in PERMISSION_FLAGS}


def has_permission(document: Any, role: Optional[str], permission: str) -> bool:
    return bool(_find_role_entry(document, role).get(permission, False))


def allowed_systems(document: Any, role: Optional[str]) -> Dict[str, bool]:
    """Which of the admin/investment systems a role may open."""
    builtin = _BUILTIN_SYSTEMS.get((role or "").strip().lower())
    if builtin is not None:
        return dict(builtin)
    systems = _find_role_entry(document, role).get("systems")
    systems = systems if isinstance(systems, dict) else {}

    def _enabled(name: str) -> bool:
        node = systems.get(name)
        return bool(isinstance(node, dict) and node.get("enabled"))

    return {"admin": _enabled("admin"), "investment": _enabled("investment")}


__all__ = ["PERMISSION_FLAGS", "get_role_permissions", "has_permission", "allowed_systems"]
