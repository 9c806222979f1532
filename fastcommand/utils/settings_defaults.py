"""Built-in business settings used before anything has been published."""

from __future__ import annotations

import copy
from typing import Any, Dict

DEFAULT_SETTINGS: Dict[str, Any] = {
    "general": {
        "businessName": "Fast Command",
        "language": "ar",
        "defaultCurrency": "MRU",
        "phone": "+222 00000000",
        "email": "support@example.com",
        "address": "Nouakchott",
    },
    "users": [
        {
            "id": "u_admin",
            "name": "Admin",
            "role": "admin",
            "email": "admin@example.com",
            "permissions": {"read": True, "write": True, "update": True, "delete": True},
        },
        {
            "id": "u_emp",
            "name": "Employee",
            "role": "employee",
            "email": "emp@example.com",
            "permissions": {"read": True, "write": True, "update": True, "delete": False},
        },
    ],
    "rolePermissions": {
        "Admin": {
            "manageSettings": True, "viewLogs": True, "manageUsers": True,
            "approveWithdrawals": True, "manageOrdersSettings": True, "manageShipmentsSettings": True,
        },
        "Manager": {
            "manageSettings": True, "viewLogs": True, "manageUsers": False,
            "approveWithdrawals": False, "manageOrdersSettings": True, "manageShipmentsSettings": True,
        },
        "Editor": {
            "manageSettings": False, "viewLogs": False, "manageUsers": False,
            "approveWithdrawals": False, "manageOrdersSettings": True, "manageShipmentsSettings": False,
        },
        "Viewer": {
            "manageSettings": False, "viewLogs": False, "manageUsers": False,
            "approveWithdrawals": False, "manageOrdersSettings": False, "manageShipmentsSettings": False,
        },
    },
    "currencies": {
        "base": "MRU",
        "rates": {"USD": 40, "AED": 11, "EUR": 43},
        "source": "Manual",
    },
    "shipping": {
        "companies": [
            {"id": "sc1", "name": "Aramex", "countries": ["UAE", "CN"]},
            {"id": "sc2", "name": "DHL", "countries": ["UAE"]},
        ],
        "types": [
            {"id": "st1", "kind": "air_standard", "country": "UAE", "pricePerKgMRU": 1000, "durationDays": 7},
            {"id": "st2", "kind": "air_express", "country": "UAE", "pricePerKgMRU": 1800, "durationDays": 3},
            {"id": "st3", "kind": "sea", "country": "CN", "pricePerKgMRU": 600, "durationDays": 30},
            {"id": "st4", "kind": "land", "country": "MA", "pricePerKgMRU": 900, "durationDays": 15},
        ],
        "preferredCurrency": "MRU",
        "shippingsTransitDays": {"air_express": 3, "air_standard": 7, "sea": 30, "land": 15},
        "handlingFee": {"type": "fixed", "value": 0},
        "customsFee": {"type": "fixed", "value": 0},
    },
    "ordersInvoices": {
        "defaultCommissionPercent": 5,
        "defaultDiscountType": "none",
        "defaultDiscountValue": 0,
        "enableDiscounts": True,
        "invoiceBranding": {},
        "autoPrintAfterPayment": False,
        "commissionPolicies": [],
    },
    "warehouse": {
        "drawers": [
            {"id": "A", "name": "Drawer A", "capacity": 50},
            {"id": "B", "name": "Drawer B", "capacity": 40},
        ],
        "fullAlertThresholdPercent": 90,
        "unitsDefault": "kg",
        "conversions": {"g": 1, "kg": 1000, "unit": 1},
    },
    "delivery": {
        "insideNKCPrice": 500,
        "outsideNKCPrice": 1500,
        "courierProfitPercent": 20,
        "mode": "fixed",
        "zones": [],
        "drivers": [],
        "maxWeightPerRider": 25,
    },
    "notifications": {
        "missingTracking": True,
        "unweighedShipments": True,
        "unpaidInvoices": True,
        "channelInApp": True,
        "channelPush": False,
    },
}


def default_settings() -> Dict[str, Any]:
    return copy.deepcopy(DEFAULT_SETTINGS)


def merge_with_defaults(document: Any) -> Dict[str, Any]:
    """Overlay a document's top-level sections on the defaults (sections replace, not merge)."""
    merged = default_settings()
    if isinstance(document, dict):
        merged.update(copy.deepcopy(document))
    return merged


__all__ = ["DEFAULT_SETTINGS", "default_settings", "merge_with_defaults"]
