import logging

from flask import Blueprint, jsonify

from errors import ValidationError
from forms import form_from_json, validated
from forms.supplier_forms import SupplierForm
from models import db
from models.inventory import InventoryItem
from models.payment_line import money
from models.supplier import Supplier, SupplierProduct
from services.lines import (get_or_404, get_for_update, find_or_create_supplier,
                            find_supplier_inventory, remove_supplier_line)
from services.payments import resolve_amount_paid

logger = logging.getLogger(__name__)

suppliers_bp = Blueprint('suppliers', __name__, url_prefix='/api/suppliers')


@suppliers_bp.route('/stats')
def supplier_stats():
    total_payables = db.session.query(
        db.func.coalesce(db.func.sum(SupplierProduct.balance), 0)).scalar()
    return jsonify({
        'supplier_count': Supplier.query.count(),
        'total_payables': money(total_payables),
        'total_products': SupplierProduct.query.count(),
    })


@suppliers_bp.route('/stats/payables')
def payables_stats():
    totals = db.session.query(
        db.func.coalesce(db.func.sum(SupplierProduct.balance), 0),
        db.func.coalesce(db.func.sum(SupplierProduct.total_amount), 0),
        db.func.coalesce(db.func.sum(SupplierProduct.amount_paid), 0),
    ).one()
    return jsonify({
        'supplier_count': Supplier.query.count(),
        'total_payables': money(totals[0]),
        'total_amount': money(totals[1]),
        'total_paid': money(totals[2]),
    })


@suppliers_bp.route('/', methods=['GET'])
def list_suppliers():
    lines = (SupplierProduct.query.join(Supplier)
             .order_by(Supplier.name, SupplierProduct.product_name)
             .all())
    return jsonify([line.to_row() for line in lines])


@suppliers_bp.route('/<int:supplier_id>', methods=['GET'])
def get_supplier(supplier_id):
    supplier = get_or_404(Supplier, supplier_id, 'Supplier not found')
    data = supplier.to_dict()
    data['products'] = [line.to_row() for line in supplier.products]
    return jsonify(data)


@suppliers_bp.route('/', methods=['POST'])
def create_supplier():
    """Record a purchase: supplier line plus the stock row it fills."""
    form = validated(form_from_json(SupplierForm))
    quantity = form.quantity.data or 0
    price = form.price.data or 0
    status, amount_paid = resolve_amount_paid(
        form.paymentStatus.data, quantity, price, form.amountPaid.data or 0)
    supplier_name = form.supplierName.data.strip()

    supplier = find_or_create_supplier(
        supplier_name,
        email=form.email.data, phone=form.phone.data,
        address=form.address.data, contact_person=form.contactPerson.data)
    line = SupplierProduct(
        supplier=supplier,
        product_name=form.productName.data,
        product_code=form.productId.data,
        quantity=quantity,
        price=price,
        payment_status=status,
        amount_paid=amount_paid,
    )
    db.session.add(line)
    db.session.add(InventoryItem(
        supplier_name=supplier_name,
        product_name=form.productName.data,
        product_code=form.productId.data,
        quantity=quantity,
        price=price,
        payment_status=status,
        amount_paid=amount_paid,
    ))
    db.session.commit()
    return jsonify(line.to_row()), 201


@suppliers_bp.route('/<int:product_id>', methods=['PUT'])
def update_supplier(product_id):
    form = validated(form_from_json(SupplierForm))
    line = get_for_update(SupplierProduct, product_id, 'Supplier product not found')
    quantity = form.quantity.data if form.quantity.data is not None else line.quantity
    price = form.price.data if form.price.data is not None else line.price
    status, amount_paid = resolve_amount_paid(
        form.paymentStatus.data, quantity, price, form.amountPaid.data or 0)

    supplier = line.supplier
    new_name = form.supplierName.data.strip()
    clash = Supplier.query.filter(Supplier.name == new_name, Supplier.id != supplier.id).first()
    if clash is not None:
        raise ValidationError(f'Supplier "{new_name}" already exists')

    # units already sold from the stock row stay sold
    stock = find_supplier_inventory(line.product_code, supplier.name)
    if stock is not None:
        already_sold = line.quantity - stock.quantity
        stock.supplier_name = new_name
        stock.product_name = form.productName.data
        stock.product_code = form.productId.data
        stock.quantity = max(0, quantity - already_sold)
        stock.price = price
        stock.payment_status = status
        stock.amount_paid = amount_paid
        logger.info('Synced inventory row %d for %s: %d sold, %d in stock',
                    stock.id, form.productId.data, already_sold, stock.quantity)

    supplier.name = new_name
    line.product_name = form.productName.data
    line.product_code = form.productId.data
    line.quantity = quantity
    line.price = price
    line.payment_status = status
    line.amount_paid = amount_paid
    db.session.commit()
    return jsonify(line.to_row())


@suppliers_bp.route('/<int:product_id>', methods=['DELETE'])
def delete_supplier(product_id):
    line = get_for_update(SupplierProduct, product_id, 'Supplier product not found')
    supplier_deleted = remove_supplier_line(line)
    db.session.commit()
    return jsonify({'message': 'Supplier product deleted successfully',
                    'supplierDeleted': supplier_deleted})
