"""Structural validation of the business settings document.

validate_settings() runs every rule on every call and accumulates all findings; it
never raises and never short-circuits. Each section is read defensively so a missing
or malformed section only produces the issues that apply to it.
"""

from __future__ import annotations

import math
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from ..domain.models import IssueSeverity, ValidationIssue
from .commerce import to_date

EPOCH = date(1970, 1, 1)
OPEN_END = date(2999, 12, 31)

DEFAULT_FULL_ALERT_THRESHOLD_PERCENT = 90
DEFAULT_COMMISSION_PERCENT = 5
DEFAULT_COURIER_PROFIT_PERCENT = 20


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _section(content: Any, *keys: str) -> Any:
    node = content
    for key in keys:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _in_bounds(value: Any, low: float, high: float) -> bool:
    return _is_number(value) and low <= value <= high


def _error(path: str, message: str) -> ValidationIssue:
    return ValidationIssue(path=path, message=message, severity=IssueSeverity.ERROR)


def _check_currency_rates(content: Any) -> List[ValidationIssue]:
    issues = []
    rates = _section(content, "currencies", "rates")
    if not isinstance(rates, dict):
        return issues
    for code, rate in rates.items():
        if not (_is_number(rate) and rate > 0):
            issues.append(_error(f"currencies.rates.{code}", "Exchange rate must be a positive number"))
    return issues


def _check_shipping_types(content: Any) -> List[ValidationIssue]:
    issues = []
    groups: Dict[str, List[dict]] = {}
    for raw in _as_list(_section(content, "shipping", "types")):
        entry = raw if isinstance(raw, dict) else {}
        type_id = entry.get("id") or ""
        price = entry.get("pricePerKgMRU")
        if not (_is_number(price) and price > 0):
            issues.append(_error(f"shipping.types.{type_id}.pricePerKgMRU", "Price per kg (MRU) must be positive"))
        duration = entry.get("durationDays")
        if duration is not None and not (_is_number(duration) and duration >= 0):
            issues.append(_error(f"shipping.types.{type_id}.durationDays", "Duration cannot be negative"))
        group_key = f"{entry.get('kind') or ''}|{entry.get('country') or ''}"
        groups.setdefault(group_key, []).append(entry)

    for group_key, entries in groups.items():
        if _has_overlapping_windows(entries):
            issues.append(_error("shipping.types", f"Overlapping effective date windows for {group_key}"))
    return issues


def _bound(value: Any, missing: date) -> Optional[date]:
    """Parsed window bound; `missing` when absent, None when present but unparseable."""
    if not value:
        return missing
    return to_date(value)


def _has_overlapping_windows(entries: Iterable[dict]) -> bool:
    windows = []
    for entry in entries:
        if not (entry.get("effectiveFrom") or entry.get("effectiveTo")):
            continue
        start = _bound(entry.get("effectiveFrom"), EPOCH)
        end = _bound(entry.get("effectiveTo"), OPEN_END)
        # An entry with an unparseable bound never overlaps anything.
        if start is None or end is None:
            continue
        windows.append((start, end))
    windows.sort(key=lambda window: window[0])
    for (_, earlier_to), (later_from, _) in zip(windows, windows[1:]):
        if earlier_to >= later_from:
            return True
    return False


def _check_warehouse(content: Any) -> List[ValidationIssue]:
    issues = []
    seen = set()
    for raw in _as_list(_section(content, "warehouse", "drawers")):
        drawer = raw if isinstance(raw, dict) else {}
        drawer_id = drawer.get("id")
        if not isinstance(drawer_id, str) or not drawer_id.strip():
            issues.append(_error("warehouse.drawers", "Every drawer needs a unique id"))
        elif drawer_id in seen:
            issues.append(_error(f"warehouse.drawers.{drawer_id}", "Duplicate drawer id"))
        else:
            seen.add(drawer_id)
        capacity = drawer.get("capacity")
        if not (_is_number(capacity) and capacity >= 1):
            issues.append(_error(
                f"warehouse.drawers.{drawer_id if drawer_id is not None else ''}.capacity",
                "Drawer capacity must be at least 1",
            ))

    threshold = _section(content, "warehouse", "fullAlertThresholdPercent")
    if threshold is None:
        threshold = DEFAULT_FULL_ALERT_THRESHOLD_PERCENT
    if not _in_bounds(threshold, 1, 100):
        issues.append(_error("warehouse.fullAlertThresholdPercent", "Alert threshold must be between 1 and 100"))
    return issues


def _check_percent(content: Any, section: str, key: str, default: float, message: str) -> List[ValidationIssue]:
    value = _section(content, section, key)
    if value is None:
        value = default
    if not _in_bounds(value, 0, 100):
        return [_error(f"{section}.{key}", message)]
    return []


def validate_settings(content: Any) -> List[ValidationIssue]:
    """Return every issue found in a configuration document (empty list when valid)."""
    issues: List[ValidationIssue] = []
    issues.extend(_check_currency_rates(content))
    issues.extend(_check_shipping_types(content))
    issues.extend(_check_warehouse(content))
    issues.extend(_check_percent(
        content, "ordersInvoices", "defaultCommissionPercent",
        DEFAULT_COMMISSION_PERCENT, "Commission percent must be between 0 and 100",
    ))
    issues.extend(_check_percent(
        content, "delivery", "courierProfitPercent",
        DEFAULT_COURIER_PROFIT_PERCENT, "Courier profit percent must be between 0 and 100",
    ))
    return issues


def has_blocking_issues(issues: Iterable[ValidationIssue]) -> bool:
    """Errors block publishing; warnings only need confirmation."""
    return any(issue.is_error for issue in issues)


def issues_to_dicts(issues: Iterable[ValidationIssue]) -> List[Dict[str, Any]]:
    return [issue.to_dict() for issue in issues]


__all__ = ["validate_settings", "has_blocking_issues", "issues_to_dicts"]
