from datetime import datetime

from models import db
from models.payment_line import PaymentLineMixin, iso


class Supplier(db.Model):
    __tablename__ = 'suppliers'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, unique=True)
    email = db.Column(db.String(255))
    phone = db.Column(db.String(50))
    address = db.Column(db.String(255))
    contact_person = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    products = db.relationship('SupplierProduct', backref='supplier',
                               cascade='all, delete-orphan',
                               order_by='SupplierProduct.product_name')

    def __repr__(self):
        return f'<Supplier {self.name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'address': self.address,
            'contact_person': self.contact_person,
            'created_at': iso(self.created_at),
        }


class SupplierProduct(PaymentLineMixin, db.Model):
    __tablename__ = 'supplier_products'
    id = db.Column(db.Integer, primary_key=True)
    supplier_id = db.Column(db.Integer, db.ForeignKey('suppliers.id'), nullable=False)
    version_id = db.Column(db.Integer, nullable=False, default=1)

    __mapper_args__ = {'version_id_col': version_id}

    def to_row(self):
        """Flat supplier x product row, as listed by the suppliers page."""
        supplier = self.supplier
        row = self.line_dict()
        row.update({
            'supplier_id': supplier.id,
            'supplier_name': supplier.name,
            'email': supplier.email,
            'phone': supplier.phone,
            'address': supplier.address,
            'contact_person': supplier.contact_person,
            'product_id': self.id,
        })
        return row
