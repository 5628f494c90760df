import logging
import time

from flask import Blueprint, jsonify, send_file

from errors import ValidationError
from forms import form_from_json, validated
from forms.customer_forms import CustomerForm, CustomerProductForm, CustomerReturnForm
from models import db
from models.customer import Customer, CustomerProduct
from models.inventory import InventoryItem
from models.payment_line import money
from services import cash
from services.export import to_excel, XLSX_MIMETYPE
from services.lines import (get_or_404, get_for_update, find_or_create_customer,
                            remove_customer_line, reduce_stock)
from services.payments import resolve_amount_paid
from services.returns import process_customer_return

logger = logging.getLogger(__name__)

customers_bp = Blueprint('customers', __name__, url_prefix='/api/customers')


def customer_rows(query=None):
    query = query if query is not None else CustomerProduct.query
    lines = (query.join(Customer)
             .order_by(Customer.name, CustomerProduct.product_name)
             .all())
    return [line.to_row() for line in lines]


# stats routes come before /<id>
@customers_bp.route('/stats')
def customer_stats():
    customer_count = Customer.query.count()
    total_receivables = db.session.query(
        db.func.coalesce(db.func.sum(CustomerProduct.balance), 0)).scalar()
    return jsonify({
        'customer_count': customer_count,
        'total_receivables': money(total_receivables),
        'total_products': CustomerProduct.query.count(),
    })


@customers_bp.route('/stats/receivables')
def receivables_stats():
    totals = db.session.query(
        db.func.coalesce(db.func.sum(CustomerProduct.balance), 0),
        db.func.coalesce(db.func.sum(CustomerProduct.total_amount), 0),
        db.func.coalesce(db.func.sum(CustomerProduct.amount_paid), 0),
    ).one()
    return jsonify({
        'customer_count': Customer.query.count(),
        'total_receivables': money(totals[0]),
        'total_amount': money(totals[1]),
        'total_paid': money(totals[2]),
    })


@customers_bp.route('/export')
def export_customers():
    output = to_excel(customer_rows(), {
        'customer_name': 'Customer',
        'product_name': 'Product',
        'product_code': 'Product code',
        'quantity': 'Quantity',
        'price': 'Unit price',
        'total_amount': 'Total',
        'payment_status': 'Payment status',
        'amount_paid': 'Amount paid',
        'balance': 'Balance',
        'created_at': 'Created at',
    }, 'Customers')
    return send_file(output, as_attachment=True, download_name='customers.xlsx',
                     mimetype=XLSX_MIMETYPE)


@customers_bp.route('/', methods=['GET'])
def list_customers():
    return jsonify(customer_rows())


@customers_bp.route('/<int:customer_id>', methods=['GET'])
def get_customer(customer_id):
    customer = get_or_404(Customer, customer_id, 'Customer not found')
    data = customer.to_dict()
    data['products'] = [line.to_row() for line in customer.products]
    return jsonify(data)


@customers_bp.route('/', methods=['POST'])
def create_customer():
    form = validated(form_from_json(CustomerForm))
    quantity = form.quantity.data if form.quantity.data is not None else 1

    # a sale drawn from stock takes its product identity and price from the row
    item = None
    if form.inventoryId.data is not None:
        item = get_for_update(InventoryItem, form.inventoryId.data, 'Inventory item not found')
    if form.price.raw_data:
        price = form.price.data
    else:
        price = item.price if item is not None else 0
    if form.productName.raw_data:
        product_name = form.productName.data
    else:
        product_name = item.product_name if item is not None else 'General Purchase'
    product_code = form.productId.data or (item.product_code if item is not None else None) \
        or f'CUST-{int(time.time() * 1000)}'

    status, amount_paid = resolve_amount_paid(
        form.paymentStatus.data, quantity, price, form.amountPaid.data or 0)

    # stock is taken first so a shortfall leaves nothing behind
    if item is not None and quantity > 0:
        item, previous = reduce_stock(item.id, quantity)
        logger.info('Sold %d of %s from inventory row %d (%d -> %d)',
                    quantity, item.product_code, item.id, previous, item.quantity)

    customer = find_or_create_customer(
        form.customerName.data.strip(),
        email=form.email.data, phone=form.phone.data, address=form.address.data)
    line = CustomerProduct(
        customer=customer,
        product_name=product_name,
        product_code=product_code,
        quantity=quantity,
        price=price,
        payment_status=status,
        amount_paid=amount_paid,
    )
    db.session.add(line)
    if amount_paid > 0:
        cash.record_transaction(cash.ADD, amount_paid, f'Customer payment from {customer.name}')
    db.session.commit()
    return jsonify(line.to_row()), 201


@customers_bp.route('/<int:product_id>', methods=['PUT'])
def update_customer(product_id):
    form = validated(form_from_json(CustomerForm))
    line = get_for_update(CustomerProduct, product_id, 'Customer product not found')
    # fields left out of the body keep their stored value
    quantity = form.quantity.data if form.quantity.raw_data else line.quantity
    price = form.price.data if form.price.raw_data else line.price
    status = form.paymentStatus.data if form.paymentStatus.raw_data else line.payment_status
    paid = form.amountPaid.data if form.amountPaid.raw_data else line.amount_paid
    status, amount_paid = resolve_amount_paid(status, quantity, price, paid or 0)

    name = form.customerName.data.strip()
    clash = Customer.query.filter(Customer.name == name, Customer.id != line.customer_id).first()
    if clash is not None:
        raise ValidationError(f'Customer "{name}" already exists')

    # the till follows the change in what was paid; a shortfall stops the edit
    payment_change = money(amount_paid - (line.amount_paid or 0))
    if payment_change > 0:
        cash.record_transaction(cash.ADD, payment_change, f'Customer payment increase from {name}')
    elif payment_change < 0:
        cash.record_transaction(cash.REMOVE, -payment_change, f'Customer payment decrease from {name}')

    line.customer.name = name
    if form.productName.raw_data:
        line.product_name = form.productName.data
    if form.productId.data:
        line.product_code = form.productId.data
    line.quantity = quantity
    line.price = price
    line.payment_status = status
    line.amount_paid = amount_paid
    db.session.commit()
    return jsonify(line.to_row())


@customers_bp.route('/<int:product_id>', methods=['DELETE'])
def delete_customer(product_id):
    line = get_for_update(CustomerProduct, product_id, 'Customer product not found')
    paid = money(line.amount_paid)
    if paid > 0:
        cash.record_transaction(
            cash.REMOVE, paid, f'Customer deletion - {line.customer.name} (Refund: {paid:.2f})')
    customer_deleted = remove_customer_line(line)
    db.session.commit()
    return jsonify({'message': 'Customer product deleted successfully',
                    'customerDeleted': customer_deleted})


@customers_bp.route('/<int:customer_id>/products', methods=['POST'])
def add_customer_product(customer_id):
    customer = get_or_404(Customer, customer_id, 'Customer not found')
    form = validated(form_from_json(CustomerProductForm))
    quantity = form.quantity.data if form.quantity.data is not None else 1
    price = form.price.data or 0
    status, amount_paid = resolve_amount_paid(
        form.payment_status.data, quantity, price, form.amount_paid.data or 0)
    line = CustomerProduct(
        customer=customer,
        product_name=form.product_name.data,
        product_code=form.product_id.data,
        quantity=quantity,
        price=price,
        payment_status=status,
        amount_paid=amount_paid,
    )
    db.session.add(line)
    if amount_paid > 0:
        cash.record_transaction(cash.ADD, amount_paid, f'Customer payment from {customer.name}')
    db.session.commit()
    return jsonify(line.to_row()), 201


@customers_bp.route('/<int:product_id>/return', methods=['POST'])
def return_customer_product(product_id):
    form = validated(form_from_json(CustomerReturnForm))
    result = process_customer_return(
        product_id,
        form.returnQuantity.data,
        refund_amount=form.refundAmount.data,
        reason=form.reason.data or 'Customer return',
        notes=form.notes.data or '',
    )
    db.session.commit()
    return jsonify(result.to_dict())
