import traceback

from flask import Blueprint, current_app, jsonify, request

from ..services import get_settings_service, quote_order
from ..utils.settings_defaults import merge_with_defaults

# Pricing calculations against the live settings document

commerce_bp = Blueprint('commerce', __name__, url_prefix='/commerce')


@commerce_bp.route('/quote', methods=['POST'])
def quote():
    """Price an order: converted amount, commission, discount, shipping and final price."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or data.get('originalPrice') is None:
        return jsonify({'error': 'missing_original_price'}), 400
    try:
        document = merge_with_defaults(get_settings_service().get_published())
        result = quote_order(
            document,
            original_price=data.get('originalPrice'),
            currency=data.get('currency'),
            store_id=data.get('storeId'),
            discount_type=data.get('discountType'),
            discount_value=data.get('discountValue'),
            weight_kg=data.get('weightKg'),
            shipping_kind=data.get('shippingKind'),
            country=data.get('country'),
            at=data.get('at'),
            default_percent=current_app.config.get('DEFAULT_COMMISSION_PERCENT'),
        )
        return jsonify(result.to_dict())
    except Exception as e:
        current_app.logger.error(f"Error quoting order: {e}")
        current_app.logger.error(traceback.format_exc())
        return jsonify({'error': 'internal_error', 'message': 'Error quoting order'}), 500
