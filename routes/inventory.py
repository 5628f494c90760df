from flask import Blueprint, jsonify

from forms import form_from_json, validated
from forms.inventory_forms import InventoryForm, ReduceStockForm, InventoryReturnForm
from models import db
from models.inventory import InventoryItem
from models.payment_line import money
from services.lines import get_or_404, get_for_update, reduce_stock
from services.payments import apply_payment
from services.returns import process_inventory_return

inventory_bp = Blueprint('inventory', __name__, url_prefix='/api/inventory')


@inventory_bp.route('/stats')
def inventory_stats():
    outstanding = db.case((InventoryItem.balance < 0, 0), else_=InventoryItem.balance)
    totals = db.session.query(
        db.func.count(InventoryItem.id),
        db.func.count(db.distinct(InventoryItem.supplier_name)),
        db.func.coalesce(db.func.sum(InventoryItem.quantity), 0),
        db.func.coalesce(db.func.sum(InventoryItem.total_amount), 0),
        db.func.coalesce(db.func.sum(outstanding), 0),
    ).one()
    return jsonify({
        'total_items': totals[0],
        'total_suppliers': totals[1],
        'total_quantity': int(totals[2]),
        'total_value': money(totals[3]),
        'total_outstanding': money(totals[4]),
    })


@inventory_bp.route('/', methods=['GET'])
def list_inventory():
    items = InventoryItem.query.order_by(InventoryItem.created_at.desc(), InventoryItem.id.desc()).all()
    return jsonify([item.to_dict() for item in items])


@inventory_bp.route('/<int:item_id>', methods=['GET'])
def get_inventory_item(item_id):
    item = get_or_404(InventoryItem, item_id, 'Inventory item not found')
    return jsonify(item.to_dict())


@inventory_bp.route('/search/<term>')
def search_inventory(term):
    pattern = f'%{term.lower()}%'
    items = (InventoryItem.query
             .filter(db.or_(db.func.lower(InventoryItem.product_name).like(pattern),
                            db.func.lower(InventoryItem.supplier_name).like(pattern),
                            db.func.lower(InventoryItem.product_code).like(pattern)))
             .order_by(InventoryItem.created_at.desc(), InventoryItem.id.desc())
             .all())
    return jsonify([item.to_dict() for item in items])


@inventory_bp.route('/supplier/<supplier_name>')
def inventory_by_supplier(supplier_name):
    items = (InventoryItem.query
             .filter(db.func.lower(InventoryItem.supplier_name) == supplier_name.lower())
             .order_by(InventoryItem.created_at.desc(), InventoryItem.id.desc())
             .all())
    return jsonify([item.to_dict() for item in items])


@inventory_bp.route('/<int:item_id>', methods=['PUT'])
def update_inventory_item(item_id):
    form = validated(form_from_json(InventoryForm))
    item = get_for_update(InventoryItem, item_id, 'Inventory item not found')
    item.supplier_name = form.supplier_name.data.strip()
    item.product_name = form.product_name.data
    item.product_code = form.product_id.data
    # fields left out of the body keep their stored value
    if form.quantity.raw_data:
        item.quantity = form.quantity.data
    if form.price.raw_data:
        item.price = form.price.data
    status = form.payment_status.data if form.payment_status.raw_data else item.payment_status
    amount_paid = form.amount_paid.data if form.amount_paid.raw_data else item.amount_paid
    apply_payment(item, status, amount_paid or 0)
    db.session.commit()
    return jsonify(item.to_dict())


@inventory_bp.route('/<int:item_id>/reduce-stock', methods=['PUT'])
def reduce_inventory_stock(item_id):
    form = validated(form_from_json(ReduceStockForm))
    item, previous = reduce_stock(item_id, form.quantity_sold.data)
    db.session.commit()
    return jsonify({
        'message': 'Inventory stock updated successfully',
        'item': item.to_dict(),
        'quantity_sold': form.quantity_sold.data,
        'previous_quantity': previous,
        'new_quantity': item.quantity,
    })


@inventory_bp.route('/<int:item_id>', methods=['DELETE'])
def delete_inventory_item(item_id):
    item = get_for_update(InventoryItem, item_id, 'Inventory item not found')
    db.session.delete(item)
    db.session.commit()
    return jsonify({'message': 'Inventory item deleted successfully'})


@inventory_bp.route('/<int:item_id>/return', methods=['POST'])
def return_inventory_item(item_id):
    form = validated(form_from_json(InventoryReturnForm))
    result = process_inventory_return(
        item_id,
        form.return_quantity.data,
        refund_amount=form.refund_amount.data,
        reason=form.return_reason.data or 'Inventory return',
        notes=form.return_notes.data or '',
    )
    db.session.commit()
    return jsonify(result.to_dict())
