import pytest
from sqlalchemy import text

from errors import InvalidQuantity, RefundExceedsProportionalCap
from models.cash import CashTransaction
from models.customer import Customer, CustomerProduct
from models.inventory import InventoryItem, RETURNED_ITEMS_SUPPLIER
from models.returns import ProductReturn, ReturnItem
from services import cash
from services import returns as returns_service
from services.returns import (check_return_quantity, generate_return_id, proportional_cap,
                              process_customer_return)


def return_customer(client, line_id, **payload):
    return client.post(f'/api/customers/{line_id}/return', json=payload)


def counts():
    return (ProductReturn.query.count(), ReturnItem.query.count(), CashTransaction.query.count())


def test_partial_return_at_the_proportional_cap(client, fund_cash, make_customer_line):
    fund_cash(100)
    line = make_customer_line()

    response = return_customer(client, line['product_id'], returnQuantity=4)
    assert response.status_code == 200, response.get_json()
    body = response.get_json()

    assert body['refundAmount'] == 20.0
    assert body['lineDeleted'] is False
    assert body['line']['quantity'] == 6
    assert body['line']['amount_paid'] == 30.0
    assert body['line']['payment_status'] == 'fully_paid'
    # 100 float + 50 paid for the sale - 20 refunded
    assert body['newBalance'] == 130.0
    assert body['cashTransaction']['amount'] == -20.0
    assert body['cashTransaction']['description'] == \
        f"Customer Return - Refund to Jane Shopper ({body['returnId']})"

    record = body['return']
    assert record['return_type'] == 'customer'
    assert record['status'] == 'completed'
    assert record['original_order_id'] == 'P1'
    assert record['customer_supplier_name'] == 'Jane Shopper'
    assert record['items'][0]['quantity'] == 4
    assert record['items'][0]['total_price'] == 20.0


def test_refund_over_the_cap_writes_nothing(client, db, fund_cash, make_customer_line):
    fund_cash(100)
    line = make_customer_line()
    before = counts()

    response = return_customer(client, line['product_id'], returnQuantity=4, refundAmount=25)
    assert response.status_code == 400
    assert response.get_json() == {
        'error': 'Refund amount (25.00) cannot exceed 20.00 (proportional to amount paid)'}

    assert counts() == before
    stored = db.session.get(CustomerProduct, line['product_id'])
    assert stored.quantity == 10
    assert stored.amount_paid == 50.0


def test_custom_refund_below_the_cap(client, fund_cash, make_customer_line):
    fund_cash(100)
    line = make_customer_line()

    body = return_customer(client, line['product_id'], returnQuantity=4, refundAmount=10).get_json()
    assert body['refundAmount'] == 10.0
    # 40 paid against a remaining total of 30
    assert body['line']['amount_paid'] == 40.0
    assert body['line']['payment_status'] == 'partially_paid'


@pytest.mark.parametrize('quantity', [0, -1, 11])
def test_invalid_return_quantity(client, fund_cash, make_customer_line, quantity):
    fund_cash(100)
    line = make_customer_line()
    response = return_customer(client, line['product_id'], returnQuantity=quantity)
    assert response.status_code == 400
    assert ProductReturn.query.count() == 0


def test_missing_return_quantity(client, make_customer_line):
    line = make_customer_line()
    response = return_customer(client, line['product_id'])
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Return quantity must be a whole number greater than 0'


def test_negative_refund_is_rejected(client, fund_cash, make_customer_line):
    fund_cash(100)
    line = make_customer_line()
    response = return_customer(client, line['product_id'], returnQuantity=1, refundAmount=-1)
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Refund amount cannot be negative'


def test_unpaid_line_needs_an_explicit_zero_refund(client, make_customer_line):
    line = make_customer_line(paymentStatus='unpaid')

    response = return_customer(client, line['product_id'], returnQuantity=2)
    assert response.status_code == 400

    body = return_customer(client, line['product_id'], returnQuantity=2, refundAmount=0).get_json()
    assert body['refundAmount'] == 0.0
    assert body['cashTransaction'] is None
    assert body['line']['quantity'] == 8
    assert body['line']['payment_status'] == 'unpaid'
    assert CashTransaction.query.count() == 0


def test_customer_refund_needs_cash_on_hand(client, db, make_customer_line):
    line = make_customer_line()
    # the sale put 50 in the till, take 45 of it out again
    client.post('/api/cash/update', json={'action': 'remove', 'amount': 45})
    before = counts()

    response = return_customer(client, line['product_id'], returnQuantity=4)
    assert response.status_code == 400
    assert response.get_json() == {'error': 'Insufficient cash. Current balance: 5.00'}
    assert counts() == before
    assert db.session.get(CustomerProduct, line['product_id']).quantity == 10


def test_return_restocks_the_oldest_inventory_row(client, db, fund_cash,
                                                  make_supplier_line, make_customer_line):
    fund_cash(100)
    make_supplier_line(quantity=3)
    make_supplier_line(supplierName='Other Wholesale', quantity=7)
    db.session.add(InventoryItem(supplier_name=RETURNED_ITEMS_SUPPLIER, product_name='Widget',
                                 product_code='P1', quantity=1, price=5))
    db.session.commit()
    line = make_customer_line()

    body = return_customer(client, line['product_id'], returnQuantity=2).get_json()
    assert body['inventoryRestocked'] is True

    rows = {row.supplier_name: row.quantity for row in InventoryItem.query.all()}
    assert rows == {'Acme Traders': 5, 'Other Wholesale': 7}


def test_return_without_inventory_still_completes(client, fund_cash, make_customer_line):
    fund_cash(100)
    line = make_customer_line(productId='NO-STOCK')

    response = return_customer(client, line['product_id'], returnQuantity=1)
    assert response.status_code == 200
    assert response.get_json()['inventoryRestocked'] is False
    assert InventoryItem.query.count() == 0


def test_full_return_deletes_the_line_and_the_customer(client, fund_cash, make_customer_line):
    fund_cash(100)
    line = make_customer_line()

    body = return_customer(client, line['product_id'], returnQuantity=10).get_json()
    assert body['lineDeleted'] is True
    assert body['partyDeleted'] is True
    assert body['line'] is None
    assert body['refundAmount'] == 50.0

    assert CustomerProduct.query.count() == 0
    assert Customer.query.count() == 0
    assert ProductReturn.query.count() == 1
    assert cash.get_balance() == 100.0


def test_full_return_keeps_a_customer_with_other_lines(client, fund_cash, make_customer_line):
    fund_cash(100)
    line = make_customer_line()
    make_customer_line(productName='Gadget', productId='P2', quantity=1)

    body = return_customer(client, line['product_id'], returnQuantity=10).get_json()
    assert body['lineDeleted'] is True
    assert body['partyDeleted'] is False
    assert Customer.query.count() == 1


def test_inventory_return_to_supplier(client, make_supplier_line):
    make_supplier_line(paymentStatus='fully_paid')
    item = InventoryItem.query.one()

    response = client.post(f'/api/inventory/{item.id}/return',
                           json={'return_quantity': 4, 'return_reason': 'Damaged'})
    assert response.status_code == 200, response.get_json()
    body = response.get_json()
    assert body['refundAmount'] == 20.0
    assert body['line']['quantity'] == 6
    assert body['line']['amount_paid'] == 30.0
    assert body['return']['return_type'] == 'supplier'
    assert body['return']['customer_supplier_name'] == 'Acme Traders'
    assert body['return']['reason'] == 'Damaged'
    # the supplier pays the refund back into the till
    assert body['cashTransaction']['amount'] == 20.0
    assert body['newBalance'] == 20.0


def test_full_inventory_return_deletes_the_row(client, make_supplier_line):
    make_supplier_line(paymentStatus='fully_paid')
    item = InventoryItem.query.one()

    body = client.post(f'/api/inventory/{item.id}/return',
                       json={'return_quantity': 10}).get_json()
    assert body['lineDeleted'] is True
    assert InventoryItem.query.count() == 0


def test_return_against_a_missing_line(client):
    response = return_customer(client, 999, returnQuantity=1)
    assert response.status_code == 404
    assert response.get_json() == {'error': 'Customer product not found'}


def test_service_leaves_the_commit_to_the_caller(app, db, fund_cash, make_customer_line):
    fund_cash(100)
    line = make_customer_line()

    process_customer_return(line['product_id'], 4)
    db.session.rollback()

    assert ProductReturn.query.count() == 0
    assert db.session.get(CustomerProduct, line['product_id']).quantity == 10
    assert cash.get_balance() == 150.0


def test_service_errors_are_typed(app, fund_cash, make_customer_line):
    fund_cash(100)
    line = make_customer_line()
    with pytest.raises(RefundExceedsProportionalCap):
        process_customer_return(line['product_id'], 1, refund_amount=6)
    with pytest.raises(InvalidQuantity):
        process_customer_return(line['product_id'], 2.5)


def test_helpers():
    assert proportional_cap(4, 10, 50) == 20.0
    assert proportional_cap(1, 3, 10) == 3.33
    assert proportional_cap(1, 0, 10) == 0.0
    with pytest.raises(InvalidQuantity):
        check_return_quantity(True, 5)
    check_return_quantity(5, 5)


def test_return_ids_get_a_suffix_on_collision(app, db, monkeypatch):
    monkeypatch.setattr('services.returns.time.time', lambda: 1700000000.0)
    first = generate_return_id()
    assert first == 'RET1700000000000'
    db.session.add(ProductReturn(return_id=first, return_type='customer', total_amount=0))
    db.session.flush()
    assert generate_return_id() == 'RET1700000000000-1'


def test_line_changed_by_another_writer_answers_409(client, db, fund_cash, make_customer_line,
                                                    monkeypatch):
    fund_cash(100)
    line = make_customer_line()
    before = counts()
    issue_return_id = returns_service.generate_return_id

    def concurrent_edit_then_issue_id():
        # another request updates the line after it was loaded here
        db.session.execute(
            text('UPDATE customer_products SET version_id = version_id + 1 WHERE id = :id'),
            {'id': line['product_id']})
        return issue_return_id()

    monkeypatch.setattr(returns_service, 'generate_return_id', concurrent_edit_then_issue_id)

    response = return_customer(client, line['product_id'], returnQuantity=4)
    assert response.status_code == 409
    assert response.get_json() == {'error': 'Record was modified by another request, please retry'}

    assert counts() == before
    assert db.session.get(CustomerProduct, line['product_id']).quantity == 10
    assert cash.get_balance() == 150.0
