"""Commission, discount and shipping-rate resolution.

Pure functions over a configuration snapshot and a point in time. Nothing here raises:
malformed numbers, dates or records degrade to safe defaults (0, None). Dates are
compared at day granularity so "effective through" a day includes the whole day.
Monetary results are rounded once, half away from zero.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, List, Mapping, Optional, Union

from ..domain.models import CommissionPolicy, CommissionType, DiscountType, ShippingTypeCfg

DateLike = Union[date, datetime, str, None]

BASE_CURRENCY = "MRU"


def to_number(value: Any) -> Optional[float]:
    """Finite float from an int/float/numeric string, else None. Booleans are not numbers."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _positive_or_zero(value: Any) -> float:
    """The number when it is strictly positive, otherwise 0."""
    number = to_number(value)
    return number if number is not None and number > 0 else 0.0


# Floats at or above 2**52 have no fractional part.
_INTEGRAL_FLOAT_THRESHOLD = 2 ** 52


def round_money(value: float) -> int:
    """Round half away from zero (2.5 -> 3, -2.5 -> -3)."""
    number = to_number(value)
    if number is None:
        return 0
    if abs(number) >= _INTEGRAL_FLOAT_THRESHOLD:
        return int(number)
    return int(Decimal(repr(number)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def to_date(value: DateLike) -> Optional[date]:
    """Day-granularity date from a date, datetime or ISO-8601 string."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            pass
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


def is_in_range(at: DateLike, effective_from: DateLike = None, effective_to: DateLike = None) -> bool:
    """True if at falls inside [effective_from, effective_to], both ends inclusive.

    Missing or unparseable bounds are open; an unparseable at is never in range.
    """
    day = to_date(at)
    if day is None:
        return False
    start = to_date(effective_from)
    end = to_date(effective_to)
    if start is not None and day < start:
        return False
    if end is not None and day > end:
        return False
    return True


def _sort_date(value: DateLike) -> date:
    return to_date(value) or date.min


def _as_policy(item: Any) -> Optional[CommissionPolicy]:
    if isinstance(item, CommissionPolicy):
        return item
    if isinstance(item, Mapping):
        return CommissionPolicy.from_dict(dict(item))
    return None


def _as_shipping_type(item: Any) -> Optional[ShippingTypeCfg]:
    if isinstance(item, ShippingTypeCfg):
        return item
    if isinstance(item, Mapping):
        return ShippingTypeCfg.from_dict(dict(item))
    return None


def _coerce_all(items: Optional[Iterable[Any]], coerce) -> List[Any]:
    if not items or isinstance(items, (str, bytes, Mapping)):
        return []
    try:
        coerced = [coerce(item) for item in items]
    except TypeError:
        return []
    return [item for item in coerced if item is not None]


def resolve_active_commission_policy(
    policies: Optional[Iterable[Any]],
    store_id: Optional[str] = None,
    at: DateLike = None,
) -> Optional[CommissionPolicy]:
    """The commission policy in force for a store on a day, or None.

    Unscoped policies apply to every store. Among matches the latest effectiveFrom wins;
    ties keep list order.
    """
    when = at if at is not None else date.today()
    candidates = [
        p for p in _coerce_all(policies, _as_policy)
        if (not p.store_id or p.store_id == store_id)
        and is_in_range(when, p.effective_from, p.effective_to)
    ]
    if not candidates:
        return None
    return sorted(candidates, key=lambda p: _sort_date(p.effective_from), reverse=True)[0]


def calculate_commission_amount(
    amount: Any,
    policies: Optional[Iterable[Any]] = None,
    store_id: Optional[str] = None,
    default_percent: Any = 5,
    at: DateLike = None,
) -> int:
    base = _positive_or_zero(amount)
    policy = resolve_active_commission_policy(policies, store_id, at)
    if policy is None:
        return round_money(_positive_or_zero(default_percent) / 100 * base)
    value = _positive_or_zero(policy.value)
    if policy.type is CommissionType.PERCENTAGE:
        return round_money(value / 100 * base)
    return round_money(value)


def apply_discount(amount: Any, discount_type: Union[DiscountType, str, None], discount_value: Any = None) -> int:
    """Discount amount in MRU. 'none' or an unknown type yields 0."""
    if isinstance(discount_type, DiscountType):
        kind = discount_type
    else:
        try:
            kind = DiscountType(str(discount_type or "none").lower())
        except ValueError:
            return 0
    value = _positive_or_zero(discount_value)
    if kind is DiscountType.PERCENTAGE:
        return round_money(value / 100 * _positive_or_zero(amount))
    if kind is DiscountType.FIXED:
        return round_money(value)
    return 0


def choose_shipping_type_for(
    types: Optional[Iterable[Any]],
    kind: Optional[str],
    country: Optional[str] = None,
    at: DateLike = None,
) -> Optional[ShippingTypeCfg]:
    """Best-effort shipping tier for a kind and destination.

    Country-specific, currently active tiers win over generic ones; when nothing is
    active the first matching tier is used anyway so a calculation always gets a rate.
    """
    when = at if at is not None else date.today()
    all_types = _coerce_all(types, _as_shipping_type)

    candidates = [
        t for t in all_types
        if kind and t.kind == kind and (not t.country or t.country == country)
    ]
    active = [
        t for t in candidates
        if not t.has_window or is_in_range(when, t.effective_from, t.effective_to)
    ]
    if active:
        return sorted(
            active,
            key=lambda t: (1 if t.country else 0, _sort_date(t.effective_from)),
            reverse=True,
        )[0]
    if candidates:
        return candidates[0]

    same_kind = [t for t in all_types if kind and t.kind == kind]
    if same_kind:
        return same_kind[0]

    if country:
        same_country = [t for t in all_types if t.country == country]
        if same_country:
            return same_country[0]
    return None


def calculate_shipping_cost_by_weight(weight_kg: Any, selected_type: Any) -> int:
    shipping_type = _as_shipping_type(selected_type)
    if shipping_type is None:
        return 0
    return round_money(_positive_or_zero(shipping_type.price_per_kg_mru) * _positive_or_zero(weight_kg))


def convert_to_mru(amount: Any, currency: Optional[str], rates: Optional[Mapping[str, Any]]) -> int:
    """Convert a foreign amount using MRU-per-unit rates; unknown rates count as 1."""
    base = _positive_or_zero(amount)
    rate = 1.0
    if currency and currency.upper() != BASE_CURRENCY and isinstance(rates, Mapping):
        candidate = to_number(rates.get(currency, rates.get(currency.upper())))
        if candidate is not None and candidate > 0:
            rate = candidate
    return round_money(base * rate)


__all__ = [
    "apply_discount",
    "calculate_commission_amount",
    "calculate_shipping_cost_by_weight",
    "choose_shipping_type_for",
    "convert_to_mru",
    "is_in_range",
    "resolve_active_commission_policy",
    "round_money",
    "to_date",
    "to_number",
]
