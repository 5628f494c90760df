import pytest

from errors import InsufficientCash, ValidationError
from models.cash import CashTransaction, CASH_IN, CASH_OUT
from services import cash


def test_balance_is_zero_on_an_empty_ledger(client):
    response = client.get('/api/cash/balance')
    assert response.status_code == 200
    assert response.get_json() == {'balance': 0.0}


def test_add_then_remove(client):
    response = client.post('/api/cash/update', json={'action': 'add', 'amount': 100,
                                                     'description': 'Sales'})
    assert response.status_code == 200
    body = response.get_json()
    assert body['newBalance'] == 100.0
    assert body['transaction']['transaction_type'] == CASH_IN

    response = client.post('/api/cash/update', json={'action': 'remove', 'amount': 60})
    body = response.get_json()
    assert body['newBalance'] == 40.0
    assert body['transaction']['transaction_type'] == CASH_OUT
    assert body['transaction']['amount'] == -60.0

    assert client.get('/api/cash/balance').get_json() == {'balance': 40.0}


def test_remove_more_than_the_balance_is_rejected(client, db):
    client.post('/api/cash/update', json={'action': 'add', 'amount': 40})

    response = client.post('/api/cash/update', json={'action': 'remove', 'amount': 50})
    assert response.status_code == 400
    assert response.get_json() == {'error': 'Insufficient cash. Current balance: 40.00'}
    assert CashTransaction.query.count() == 1


@pytest.mark.parametrize('payload', [
    {'action': 'withdraw', 'amount': 10},
    {'action': 'add', 'amount': 0},
    {'action': 'add', 'amount': -5},
    {'action': 'add'},
])
def test_invalid_updates_are_rejected(client, payload):
    response = client.post('/api/cash/update', json=payload)
    assert response.status_code == 400
    assert 'error' in response.get_json()
    assert CashTransaction.query.count() == 0


def test_record_transaction_does_not_commit(app, db):
    cash.record_transaction(cash.ADD, 25, 'Float')
    assert cash.get_balance() == 25.0
    db.session.rollback()
    assert cash.get_balance() == 0.0


def test_ensure_available(app):
    cash.record_transaction(cash.ADD, 10)
    assert cash.ensure_available(10) == 10.0
    with pytest.raises(InsufficientCash):
        cash.ensure_available(10.01)


def test_record_transaction_rejects_unknown_direction(app):
    with pytest.raises(ValidationError):
        cash.record_transaction('transfer', 10)


def test_recent_transactions_are_newest_first_and_limited(client):
    for amount in (1, 2, 3):
        client.post('/api/cash/update', json={'action': 'add', 'amount': amount})

    body = client.get('/api/cash/recent?limit=2').get_json()
    transactions = body['transactions']
    assert [t['amount'] for t in transactions] == [3.0, 2.0]
    assert transactions[0]['type'] == CASH_IN
    assert transactions[0]['description'] == 'No description'
    assert transactions[0]['formattedDate']
    assert transactions[0]['formattedTime']


def test_list_and_export(client):
    client.post('/api/cash/update', json={'action': 'add', 'amount': 5})
    assert len(client.get('/api/cash').get_json()) == 1

    response = client.get('/api/cash/export')
    assert response.status_code == 200
    assert response.mimetype.endswith('spreadsheetml.sheet')
    assert response.data[:2] == b'PK'
