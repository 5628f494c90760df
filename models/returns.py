from datetime import datetime, date

from models import db
from models.payment_line import iso, money

CUSTOMER_RETURN = 'customer'
SUPPLIER_RETURN = 'supplier'


class ProductReturn(db.Model):
    __tablename__ = 'returns'
    id = db.Column(db.Integer, primary_key=True)
    return_id = db.Column(db.String(50), nullable=False, unique=True)
    return_type = db.Column(db.String(20), nullable=False)  # customer / supplier
    original_order_id = db.Column(db.String(100))
    party_name = db.Column('customer_supplier_name', db.String(255))
    return_date = db.Column(db.Date, default=date.today)
    total_amount = db.Column(db.Float, nullable=False, default=0)
    status = db.Column(db.String(20), nullable=False, default='completed')
    reason = db.Column(db.String(255))
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    items = db.relationship('ReturnItem', backref='product_return',
                            cascade='all, delete-orphan',
                            order_by='ReturnItem.id')

    def __repr__(self):
        return f'<ProductReturn {self.return_id}>'

    def to_dict(self, with_items=False):
        data = {
            'id': self.id,
            'return_id': self.return_id,
            'return_type': self.return_type,
            'original_order_id': self.original_order_id,
            'customer_supplier_name': self.party_name,
            'return_date': iso(self.return_date),
            'total_amount': money(self.total_amount),
            'status': self.status,
            'reason': self.reason,
            'notes': self.notes,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
            'product_name': self.items[0].product_name if self.items else None,
        }
        if with_items:
            data['items'] = [item.to_dict() for item in self.items]
        return data


class ReturnItem(db.Model):
    __tablename__ = 'return_items'
    id = db.Column(db.Integer, primary_key=True)
    return_id = db.Column(db.String(50), db.ForeignKey('returns.return_id'), nullable=False)
    product_name = db.Column(db.String(255))
    product_code = db.Column('product_id', db.String(100))
    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Float, nullable=False)
    total_price = db.Column(db.Float, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'return_id': self.return_id,
            'product_name': self.product_name,
            'product_id': self.product_code,
            'quantity': self.quantity,
            'unit_price': money(self.unit_price),
            'total_price': money(self.total_price),
        }
