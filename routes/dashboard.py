from flask import Blueprint, jsonify

from models import db
from models.customer import CustomerProduct
from models.inventory import InventoryItem
from models.payment_line import money
from models.supplier import SupplierProduct
from services import cash

dashboard_bp = Blueprint('dashboard', __name__, url_prefix='/api/dashboard')


def column_sum(expression):
    return money(db.session.query(db.func.coalesce(db.func.sum(expression), 0)).scalar())


@dashboard_bp.route('/stats')
def dashboard_stats():
    return jsonify({
        'inventoryValue': column_sum(InventoryItem.total_amount),
        'customerOwingBills': column_sum(CustomerProduct.balance),
        'debtToSuppliers': column_sum(SupplierProduct.balance),
        'cashOnHand': cash.get_balance(),
    })
