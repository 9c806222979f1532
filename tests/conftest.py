import copy

import pytest

from fastcommand import create_app
from fastcommand.services import build_settings_service


VALID_SETTINGS = {
    'currencies': {'rates': {'USD': 40, 'AED': 11, 'EUR': 43}},
    'shipping': {'types': [
        {'id': 't1', 'kind': 'air_standard', 'country': 'UAE', 'pricePerKgMRU': 1000, 'durationDays': 7},
    ]},
    'warehouse': {'drawers': [{'id': 'A', 'name': 'A', 'capacity': 10}], 'fullAlertThresholdPercent': 90},
    'ordersInvoices': {'defaultCommissionPercent': 5},
    'delivery': {'courierProfitPercent': 20},
}


@pytest.fixture
def valid_settings():
    return copy.deepcopy(VALID_SETTINGS)


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / 'data'


@pytest.fixture
def service(data_dir):
    return build_settings_service(data_dir)


@pytest.fixture
def app(data_dir):
    app = create_app({'TESTING': True, 'DATA_DIR': str(data_dir), 'LOG_LEVEL': 'WARNING'})
    yield app


@pytest.fixture
def client(app):
    return app.test_client()
