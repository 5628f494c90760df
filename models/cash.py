from datetime import datetime

from models import db
from models.payment_line import iso, money

CASH_IN = 'cash_in'
CASH_OUT = 'cash_out'


# append-only cash ledger, the sign of amount encodes the direction
class CashTransaction(db.Model):
    __tablename__ = 'cash_transactions'
    id = db.Column(db.Integer, primary_key=True)
    transaction_type = db.Column(db.String(20), nullable=False)  # cash_in / cash_out
    amount = db.Column(db.Float, nullable=False)
    description = db.Column(db.String(500))
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f'<CashTransaction {self.transaction_type} {self.amount}>'

    def to_dict(self):
        return {
            'id': self.id,
            'transaction_type': self.transaction_type,
            'amount': money(self.amount),
            'description': self.description,
            'created_at': iso(self.created_at),
        }
