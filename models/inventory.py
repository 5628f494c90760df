from models import db
from models.payment_line import PaymentLineMixin

# placeholder supplier name some old clients used for restocked returns;
# such rows must never survive a customer return
RETURNED_ITEMS_SUPPLIER = 'Returned Items'


# stock row, independent of the supplier line it was created with
class InventoryItem(PaymentLineMixin, db.Model):
    __tablename__ = 'inventory'
    id = db.Column(db.Integer, primary_key=True)
    supplier_name = db.Column(db.String(255), nullable=False, index=True)
    version_id = db.Column(db.Integer, nullable=False, default=1)

    __mapper_args__ = {'version_id_col': version_id}

    def __repr__(self):
        return f'<InventoryItem {self.product_code} x{self.quantity}>'

    def add_quantity(self, amount):
        self.quantity += amount

    def subtract_quantity(self, amount):
        if self.quantity >= amount:
            self.quantity -= amount
            return True
        return False

    def to_dict(self):
        row = self.line_dict()
        row.update({
            'id': self.id,
            'supplier_name': self.supplier_name,
            # the inventory table exposes the product code as product_id
            'product_id': self.product_code,
        })
        return row
