import logging

from errors import InsufficientStock, NotFound, ValidationError
from models import db
from models.customer import Customer
from models.inventory import InventoryItem, RETURNED_ITEMS_SUPPLIER
from models.supplier import Supplier

logger = logging.getLogger(__name__)


def get_or_404(model, record_id, message):
    record = db.session.get(model, record_id)
    if record is None:
        raise NotFound(message)
    return record


def get_for_update(model, record_id, message):
    """Load a row under SELECT ... FOR UPDATE (a no-op on SQLite)."""
    record = model.query.filter_by(id=record_id).with_for_update().first()
    if record is None:
        raise NotFound(message)
    return record


def find_or_create_customer(name, **contact):
    customer = Customer.query.filter_by(name=name).first()
    if customer is None:
        customer = Customer(name=name, **contact)
        db.session.add(customer)
        db.session.flush()
        logger.info('Created customer %s', name)
    return customer


def find_or_create_supplier(name, **contact):
    supplier = Supplier.query.filter_by(name=name).first()
    if supplier is None:
        supplier = Supplier(name=name, **contact)
        db.session.add(supplier)
        db.session.flush()
        logger.info('Created supplier %s', name)
    return supplier


def remove_customer_line(line):
    """Delete a customer line, and the customer with it when it was their last."""
    customer = line.customer
    customer.products.remove(line)
    party_deleted = False
    if not customer.products:
        db.session.delete(customer)
        party_deleted = True
    db.session.flush()
    return party_deleted


def remove_supplier_line(line):
    # inventory rows are kept, only the purchase record goes
    supplier = line.supplier
    supplier.products.remove(line)
    party_deleted = False
    if not supplier.products:
        db.session.delete(supplier)
        party_deleted = True
    db.session.flush()
    return party_deleted


def reduce_stock(item_id, quantity):
    """Decrement an inventory row under lock. Returns (item, previous_quantity)."""
    if quantity is None or quantity <= 0:
        raise ValidationError('Invalid quantity sold')
    item = get_for_update(InventoryItem, item_id, 'Inventory item not found')
    previous = item.quantity
    if not item.subtract_quantity(quantity):
        raise InsufficientStock(f'Insufficient stock. Available: {previous}, Requested: {quantity}')
    return item, previous


def find_restock_row(product_code):
    """Earliest-created inventory row for a product code, placeholder rows excluded."""
    return (InventoryItem.query
            .filter(InventoryItem.product_code == product_code,
                    InventoryItem.supplier_name != RETURNED_ITEMS_SUPPLIER)
            .order_by(InventoryItem.created_at.asc(), InventoryItem.id.asc())
            .with_for_update()
            .first())


def purge_returned_items_rows(product_code):
    stray = InventoryItem.query.filter_by(
        supplier_name=RETURNED_ITEMS_SUPPLIER, product_code=product_code).all()
    for row in stray:
        db.session.delete(row)
    if stray:
        logger.info('Removed %d "%s" inventory row(s) for %s',
                    len(stray), RETURNED_ITEMS_SUPPLIER, product_code)
    return len(stray)


def find_supplier_inventory(product_code, supplier_name):
    return (InventoryItem.query
            .filter_by(product_code=product_code, supplier_name=supplier_name)
            .order_by(InventoryItem.created_at.asc(), InventoryItem.id.asc())
            .first())
