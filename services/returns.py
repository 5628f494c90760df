"""
Return processing.

A return is executed against exactly one product line: a customer line
(goods coming back from a customer) or an inventory row (goods going back to
the supplier). All writes of a return happen in the caller's single
transaction: the return record and its item, the reconciled line, the
restocked inventory row and the cash movement for the refund. Every check
runs before the first write.
"""

import logging
import time
from datetime import date

from errors import InvalidQuantity, NotFound, RefundExceedsProportionalCap, ValidationError
from models import db
from models.customer import CustomerProduct
from models.inventory import InventoryItem
from models.payment_line import money
from models.returns import ProductReturn, ReturnItem, CUSTOMER_RETURN, SUPPLIER_RETURN
from services import cash
from services.lines import (get_for_update, remove_customer_line, find_restock_row,
                            purge_returned_items_rows)
from services.payments import derive_payment_status

logger = logging.getLogger(__name__)

COMPLETED = 'completed'


class ReturnResult:

    def __init__(self, record, line, line_deleted, party_deleted=False,
                 inventory_restocked=None, cash_transaction=None, new_balance=None):
        self.record = record
        self.line = line
        self.line_deleted = line_deleted
        self.party_deleted = party_deleted
        self.inventory_restocked = inventory_restocked
        self.cash_transaction = cash_transaction
        self.new_balance = new_balance

    def to_dict(self):
        return {
            'message': 'Return processed successfully',
            'returnId': self.record.return_id,
            'refundAmount': money(self.record.total_amount),
            'return': self.record.to_dict(with_items=True),
            'line': None if self.line_deleted else self.line,
            'lineDeleted': self.line_deleted,
            'partyDeleted': self.party_deleted,
            'inventoryRestocked': self.inventory_restocked,
            'cashTransaction': self.cash_transaction.to_dict() if self.cash_transaction else None,
            'newBalance': self.new_balance,
        }


def generate_return_id():
    base = f'RET{int(time.time() * 1000)}'
    candidate, suffix = base, 1
    while ProductReturn.query.filter_by(return_id=candidate).first() is not None:
        candidate = f'{base}-{suffix}'
        suffix += 1
    return candidate


def check_return_quantity(return_quantity, available):
    if return_quantity is None or isinstance(return_quantity, bool) or not isinstance(return_quantity, int):
        raise InvalidQuantity('Return quantity must be a whole number greater than 0')
    if return_quantity <= 0:
        raise InvalidQuantity('Return quantity must be greater than 0')
    if return_quantity > available:
        raise InvalidQuantity(
            f'Return quantity ({return_quantity}) cannot exceed current quantity ({available})')


def proportional_cap(return_quantity, quantity, amount_paid):
    """Most that may be refunded for return_quantity of quantity units."""
    if not quantity:
        return 0.0
    return money(return_quantity / quantity * (amount_paid or 0))


def resolve_refund(line, return_quantity, refund_amount=None):
    if refund_amount is None:
        refund = money(return_quantity * line.price)
    else:
        if refund_amount < 0:
            raise ValidationError('Refund amount cannot be negative')
        refund = money(refund_amount)

    cap = proportional_cap(return_quantity, line.quantity, line.amount_paid)
    if refund > cap:
        raise RefundExceedsProportionalCap(
            f'Refund amount ({refund:.2f}) cannot exceed {cap:.2f} (proportional to amount paid)')
    return refund


def process_return(line, return_type, return_quantity, refund_amount=None, reason='', notes=''):
    """Validate and execute a return against line. Nothing is committed here."""
    if return_type == CUSTOMER_RETURN:
        if line.customer is None:
            raise NotFound('Customer not found')
        party_name = line.customer.name
    elif return_type == SUPPLIER_RETURN:
        party_name = line.supplier_name
    else:
        raise ValidationError(f'Unknown return type: {return_type}')

    check_return_quantity(return_quantity, line.quantity)
    refund = resolve_refund(line, return_quantity, refund_amount)
    # a customer refund is paid out of the till
    if return_type == CUSTOMER_RETURN and refund > 0:
        cash.ensure_available(refund)

    record = ProductReturn(
        return_id=generate_return_id(),
        return_type=return_type,
        original_order_id=line.product_code,
        party_name=party_name,
        return_date=date.today(),
        total_amount=refund,
        status=COMPLETED,
        reason=reason,
        notes=notes,
    )
    record.items.append(ReturnItem(
        product_name=line.product_name,
        product_code=line.product_code,
        quantity=return_quantity,
        unit_price=line.price,
        total_price=refund,
    ))
    db.session.add(record)

    product_code = line.product_code
    new_quantity = line.quantity - return_quantity
    new_amount_paid = money(max(0.0, (line.amount_paid or 0) - refund))
    new_status = derive_payment_status(new_amount_paid, money(new_quantity * line.price))

    party_deleted = False
    if new_quantity == 0:
        if return_type == CUSTOMER_RETURN:
            party_deleted = remove_customer_line(line)
        else:
            db.session.delete(line)
        line_state = None
    else:
        line.quantity = new_quantity
        line.amount_paid = new_amount_paid
        line.payment_status = new_status
        db.session.flush()
        line_state = line.to_row() if return_type == CUSTOMER_RETURN else line.to_dict()

    restocked = None
    if return_type == CUSTOMER_RETURN:
        restocked = restock(product_code, return_quantity)
        purge_returned_items_rows(product_code)

    transaction, new_balance = None, None
    if refund > 0:
        if return_type == CUSTOMER_RETURN:
            transaction, new_balance = cash.record_transaction(
                cash.REMOVE, refund, f'Customer Return - Refund to {party_name} ({record.return_id})')
        else:
            transaction, new_balance = cash.record_transaction(
                cash.ADD, refund, f'Supplier Return - Refund from {party_name} ({record.return_id})')

    db.session.flush()
    logger.info('Processed %s return %s: %d x %s, refund %.2f',
                return_type, record.return_id, return_quantity, product_code, refund)
    return ReturnResult(record, line_state, line_state is None, party_deleted,
                        restocked, transaction, new_balance)


def restock(product_code, quantity):
    row = find_restock_row(product_code)
    if row is None:
        logger.warning('No inventory found for product %s. Return processed but inventory not updated.',
                       product_code)
        return False
    row.add_quantity(quantity)
    return True


def process_customer_return(line_id, return_quantity, refund_amount=None, reason='Customer return', notes=''):
    line = get_for_update(CustomerProduct, line_id, 'Customer product not found')
    return process_return(line, CUSTOMER_RETURN, return_quantity, refund_amount, reason, notes)


def process_inventory_return(item_id, return_quantity, refund_amount=None, reason='Inventory return', notes=''):
    """Send stock from an inventory row back to its supplier.

    The refund is money received from the supplier: it is written to the cash
    ledger as cash_in (an `add`), the opposite direction of a customer refund.
    A zero refund leaves the ledger untouched.
    """
    item = get_for_update(InventoryItem, item_id, 'Inventory item not found')
    return process_return(item, SUPPLIER_RETURN, return_quantity, refund_amount, reason, notes)
