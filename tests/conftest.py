import pytest

from app import create_app
from config import TestConfig
from models import db as _db
from services import cash


@pytest.fixture
def app():
    app = create_app(TestConfig)
    ctx = app.app_context()
    ctx.push()
    yield app
    _db.session.remove()
    _db.drop_all()
    ctx.pop()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def fund_cash(app):
    """Put money in the till so customer refunds can be paid out."""
    def _fund(amount=1000):
        cash.record_transaction(cash.ADD, amount, 'Opening float')
        _db.session.commit()
    return _fund


@pytest.fixture
def make_supplier_line(client):
    def _make(**overrides):
        payload = {
            'supplierName': 'Acme Traders',
            'productName': 'Widget',
            'productId': 'P1',
            'quantity': 10,
            'price': 5,
            'paymentStatus': 'unpaid',
        }
        payload.update(overrides)
        response = client.post('/api/suppliers/', json=payload)
        assert response.status_code == 201, response.get_json()
        return response.get_json()
    return _make


@pytest.fixture
def make_customer_line(client):
    def _make(**overrides):
        payload = {
            'customerName': 'Jane Shopper',
            'productName': 'Widget',
            'productId': 'P1',
            'quantity': 10,
            'price': 5,
            'paymentStatus': 'fully_paid',
        }
        payload.update(overrides)
        response = client.post('/api/customers/', json=payload)
        assert response.status_code == 201, response.get_json()
        return response.get_json()
    return _make
