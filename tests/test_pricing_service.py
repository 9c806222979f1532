from datetime import date

from fastcommand.services.pricing_service import quote_order
from fastcommand.utils.settings_defaults import default_settings


def _document(**orders):
    document = default_settings()
    document['ordersInvoices'].update(orders)
    return document


def test_quote_in_base_currency_uses_default_percent():
    quote = quote_order(_document(), original_price=10000)
    assert quote.currency == 'MRU'
    assert quote.converted_mru == 10000
    assert quote.commission == 500
    assert quote.commission_policy_id is None
    assert quote.discount == 0
    assert quote.final_price == 9500
    assert quote.shipping_type_id is None
    assert quote.shipping_cost == 0


def test_quote_converts_and_applies_policy_and_discount():
    document = _document(commissionPolicies=[{'id': 'flat', 'type': 'fixed', 'value': 200}])
    quote = quote_order(
        document, original_price=250, currency='usd',
        discount_type='percentage', discount_value=10,
    )
    assert quote.currency == 'USD'
    assert quote.converted_mru == 10000
    assert quote.commission == 200
    assert quote.commission_policy_id == 'flat'
    assert quote.discount == 1000
    assert quote.final_price == 8800


def test_quote_with_shipping():
    quote = quote_order(
        _document(), original_price=1000, weight_kg=3,
        shipping_kind='sea', country='CN', at=date(2024, 5, 1),
    )
    assert quote.shipping_type_id == 'st3'
    assert quote.shipping_cost == 1800
    # shipping is reported separately, not folded into the final price
    assert quote.final_price == 950


def test_default_percent_fallbacks():
    document = default_settings()
    del document['ordersInvoices']['defaultCommissionPercent']
    assert quote_order(document, original_price=1000, default_percent=8).commission == 80
    assert quote_order(document, original_price=1000).commission == 50
    assert quote_order({}, original_price=1000).commission == 50


def test_quote_to_dict_uses_camel_case():
    data = quote_order(_document(), original_price=100).to_dict()
    assert data['convertedMRU'] == 100
    assert data['finalPrice'] == 95
    assert set(data) == {
        'originalPrice', 'currency', 'convertedMRU', 'commission', 'commissionPolicyId',
        'discount', 'finalPrice', 'shippingTypeId', 'shippingCost',
    }
