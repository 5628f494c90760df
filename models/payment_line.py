from datetime import datetime

from sqlalchemy.ext.hybrid import hybrid_property

from models import db

PAYMENT_STATUSES = ('unpaid', 'partially_paid', 'fully_paid')


def money(value):
    return round(float(value or 0), 2)


def iso(value):
    return value.isoformat() if value else None


class PaymentLineMixin:
    """Columns shared by supplier, customer and inventory product lines.

    Total and balance are derived from quantity, price and amount paid on
    every read, in Python and in SQL, and are never stored.
    """
    product_name = db.Column(db.String(255), nullable=False)
    # product code, named product_id on the wire and in the schema
    product_code = db.Column('product_id', db.String(100), nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False, default=0)
    price = db.Column(db.Float, nullable=False, default=0)
    payment_status = db.Column(db.String(20), nullable=False, default='unpaid')
    amount_paid = db.Column(db.Float, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @hybrid_property
    def total_amount(self):
        return money((self.quantity or 0) * (self.price or 0))

    @total_amount.expression
    def total_amount(cls):
        return cls.quantity * cls.price

    @hybrid_property
    def balance(self):
        return money((self.quantity or 0) * (self.price or 0) - (self.amount_paid or 0))

    @balance.expression
    def balance(cls):
        return cls.quantity * cls.price - cls.amount_paid

    def line_dict(self):
        return {
            'product_name': self.product_name,
            'product_code': self.product_code,
            'quantity': self.quantity,
            'price': money(self.price),
            'payment_status': self.payment_status,
            'amount_paid': money(self.amount_paid),
            'total_amount': self.total_amount,
            'balance': self.balance,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }
