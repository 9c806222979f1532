"""Order pricing against a settings document (rates, commission policies, shipping tiers)."""

from typing import Any, Optional

from ..domain.models import OrderQuote
from ..utils.commerce import (
    DateLike,
    apply_discount,
    calculate_commission_amount,
    calculate_shipping_cost_by_weight,
    choose_shipping_type_for,
    convert_to_mru,
    resolve_active_commission_policy,
    to_number,
)
from ..utils.settings_validation import DEFAULT_COMMISSION_PERCENT


def _section(document: Any, key: str) -> dict:
    value = document.get(key) if isinstance(document, dict) else None
    return value if isinstance(value, dict) else {}


def quote_order(
    document: Any,
    *,
    original_price: Any,
    currency: Optional[str] = None,
    store_id: Optional[str] = None,
    discount_type: Optional[str] = None,
    discount_value: Any = None,
    weight_kg: Any = None,
    shipping_kind: Optional[str] = None,
    country: Optional[str] = None,
    at: DateLike = None,
    default_percent: Any = None,
) -> OrderQuote:
    """Price an order: convert to MRU, take commission and discount, optionally add shipping.

    The default commission percent comes from ordersInvoices.defaultCommissionPercent,
    then from default_percent, then the built-in 5%.
    """
    orders = _section(document, "ordersInvoices")
    rates = _section(document, "currencies").get("rates")
    policies = orders.get("commissionPolicies") or []

    percent = to_number(orders.get("defaultCommissionPercent"))
    if percent is None:
        percent = to_number(default_percent)
    if percent is None:
        percent = DEFAULT_COMMISSION_PERCENT

    converted = convert_to_mru(original_price, currency, rates)
    policy = resolve_active_commission_policy(policies, store_id, at)
    commission = calculate_commission_amount(converted, policies, store_id, percent, at)
    discount = apply_discount(converted, discount_type, discount_value)

    shipping_type = None
    shipping_cost = 0
    if shipping_kind:
        shipping_type = choose_shipping_type_for(
            _section(document, "shipping").get("types"), shipping_kind, country, at
        )
        shipping_cost = calculate_shipping_cost_by_weight(weight_kg, shipping_type)

    return OrderQuote(
        original_price=to_number(original_price) or 0,
        currency=(currency or "MRU").upper(),
        converted_mru=converted,
        commission=commission,
        discount=discount,
        final_price=converted - commission - discount,
        commission_policy_id=policy.id if policy else None,
        shipping_type_id=shipping_type.id if shipping_type else None,
        shipping_cost=shipping_cost,
    )


__all__ = ["quote_order"]
