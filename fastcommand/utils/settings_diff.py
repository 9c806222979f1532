"""Top-level diffs between configuration documents."""

from __future__ import annotations

import copy
from typing import Any, Dict, Iterable, List

from ..domain.models import DiffEntry

# Sections whose changes downstream screens react to (reprice orders, reload rates).
CHANGE_TOPICS: Dict[str, str] = {
    "shipping": "settings.shipping.changed",
    "currencies": "settings.currencies.changed",
    "ordersInvoices": "settings.commissions.changed",
}


def values_equal(left: Any, right: Any) -> bool:
    """Structural JSON equality: key order is irrelevant, True is not 1."""
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, dict) and isinstance(right, dict):
        if left.keys() != right.keys():
            return False
        return all(values_equal(left[k], right[k]) for k in left)
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        return len(left) == len(right) and all(values_equal(a, b) for a, b in zip(left, right))
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    if type(left) is not type(right):
        return False
    return left == right


def diff_documents(old: Any, new: Any) -> List[DiffEntry]:
    """One entry per changed top-level key, carrying the whole old and new values."""
    old = old if isinstance(old, dict) else {}
    new = new if isinstance(new, dict) else {}
    keys = list(old.keys()) + [k for k in new.keys() if k not in old]
    diffs = []
    for key in keys:
        old_value = old.get(key)
        new_value = new.get(key)
        if not values_equal(old_value, new_value):
            diffs.append(DiffEntry(key=key, old=copy.deepcopy(old_value), new=copy.deepcopy(new_value)))
    return diffs


def change_topics(diffs: Iterable[DiffEntry]) -> List[str]:
    topics = []
    for diff in diffs:
        topic = CHANGE_TOPICS.get(diff.key)
        if topic and topic not in topics:
            topics.append(topic)
    return topics


__all__ = ["CHANGE_TOPICS", "values_equal", "diff_documents", "change_topics"]
