import logging

from flask_babel import format_date, format_time

from errors import InsufficientCash, ValidationError
from models import db
from models.cash import CashTransaction, CASH_IN, CASH_OUT
from models.payment_line import money

logger = logging.getLogger(__name__)

ADD = 'add'
REMOVE = 'remove'


def get_balance():
    total = db.session.query(
        db.func.coalesce(db.func.sum(CashTransaction.amount), 0)
    ).scalar()
    return money(total)


def ensure_available(amount):
    current = get_balance()
    if current < amount:
        raise InsufficientCash(f'Insufficient cash. Current balance: {current:.2f}')
    return current


def record_transaction(direction, amount, description=''):
    """Append a signed cash movement and return (transaction, new_balance).

    Nothing is committed here; the caller owns the transaction so the write
    can join a larger unit of work.
    """
    if direction not in (ADD, REMOVE):
        raise ValidationError('Action must be either "add" or "remove"')
    if amount is None or amount <= 0:
        raise ValidationError('Invalid action or amount')
    amount = money(amount)

    if direction == REMOVE:
        ensure_available(amount)

    transaction = CashTransaction(
        transaction_type=CASH_IN if direction == ADD else CASH_OUT,
        amount=amount if direction == ADD else -amount,
        description=description or '',
    )
    db.session.add(transaction)
    db.session.flush()
    new_balance = get_balance()
    logger.info('Cash %s %.2f (%s), balance now %.2f',
                transaction.transaction_type, amount, description or '-', new_balance)
    return transaction, new_balance


def get_recent(limit):
    transactions = (CashTransaction.query
                    .order_by(CashTransaction.created_at.desc(), CashTransaction.id.desc())
                    .limit(limit)
                    .all())
    return [{
        'id': t.id,
        'type': t.transaction_type,
        'amount': money(t.amount),
        'description': t.description or 'No description',
        'date': t.created_at.isoformat() if t.created_at else None,
        'formattedDate': format_date(t.created_at) if t.created_at else '',
        'formattedTime': format_time(t.created_at) if t.created_at else '',
    } for t in transactions]
