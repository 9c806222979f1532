# Utils package for Fast Command

# Commission, discount and shipping-rate resolution
from .commerce import (
    apply_discount,
    calculate_commission_amount,
    calculate_shipping_cost_by_weight,
    choose_shipping_type_for,
    convert_to_mru,
    resolve_active_commission_policy,
)

# Settings document validation
from .settings_validation import (
    has_blocking_issues,
    validate_settings,
)

__all__ = [
    'apply_discount',
    'calculate_commission_amount',
    'calculate_shipping_cost_by_weight',
    'choose_shipping_type_for',
    'convert_to_mru',
    'resolve_active_commission_policy',
    'has_blocking_issues',
    'validate_settings',
]
