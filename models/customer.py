from datetime import datetime

from models import db
from models.payment_line import PaymentLineMixin, iso


class Customer(db.Model):
    __tablename__ = 'customers'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, unique=True)
    email = db.Column(db.String(255))
    phone = db.Column(db.String(50))
    address = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    products = db.relationship('CustomerProduct', backref='customer',
                               cascade='all, delete-orphan',
                               order_by='CustomerProduct.product_name')

    def __repr__(self):
        return f'<Customer {self.name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'address': self.address,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }


class CustomerProduct(PaymentLineMixin, db.Model):
    __tablename__ = 'customer_products'
    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, db.ForeignKey('customers.id'), nullable=False)
    version_id = db.Column(db.Integer, nullable=False, default=1)

    __mapper_args__ = {'version_id_col': version_id}

    def to_row(self):
        customer = self.customer
        row = self.line_dict()
        row.update({
            'customer_id': customer.id,
            'customer_name': customer.name,
            'product_id': self.id,
        })
        return row
