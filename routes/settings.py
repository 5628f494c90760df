import logging

from flask import Blueprint, jsonify
from sqlalchemy import text

from models import db
from models.cash import CashTransaction
from models.customer import Customer, CustomerProduct
from models.inventory import InventoryItem
from models.returns import ProductReturn, ReturnItem
from models.supplier import Supplier, SupplierProduct

logger = logging.getLogger(__name__)

settings_bp = Blueprint('settings', __name__, url_prefix='/api/settings')

# children before parents
RESET_ORDER = [ReturnItem, ProductReturn, CustomerProduct, Customer,
               SupplierProduct, Supplier, InventoryItem, CashTransaction]


@settings_bp.route('/counts')
def data_counts():
    counts = {model.__tablename__: model.query.count() for model in RESET_ORDER}
    counts['total'] = (counts['suppliers'] + counts['supplier_products'] + counts['inventory']
                       + counts['customers'] + counts['customer_products'] + counts['returns'])
    return jsonify(counts)


@settings_bp.route('/reset', methods=['DELETE'])
def reset_data():
    for model in RESET_ORDER:
        model.query.delete(synchronize_session=False)

    # sqlite reuses ids on empty tables, postgres needs its sequences restarted
    if db.session.get_bind().dialect.name == 'postgresql':
        for model in RESET_ORDER:
            db.session.execute(text(f'ALTER SEQUENCE {model.__tablename__}_id_seq RESTART WITH 1'))

    db.session.commit()
    db.session.expunge_all()
    logger.info('All ledger data has been reset')
    return jsonify({'success': True, 'message': 'All data has been successfully reset'})
