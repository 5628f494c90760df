from flask import Blueprint, current_app, jsonify, request, send_file

from forms import form_from_json, validated
from forms.cash_forms import CashUpdateForm
from models import db
from models.cash import CashTransaction
from services import cash
from services.export import to_excel, XLSX_MIMETYPE

cash_bp = Blueprint('cash', __name__, url_prefix='/api/cash')


@cash_bp.route('/', methods=['GET'])
def list_transactions():
    transactions = (CashTransaction.query
                    .order_by(CashTransaction.created_at.desc(), CashTransaction.id.desc())
                    .all())
    return jsonify([t.to_dict() for t in transactions])


@cash_bp.route('/update', methods=['POST'])
def update_cash():
    form = validated(form_from_json(CashUpdateForm))
    transaction, new_balance = cash.record_transaction(
        form.action.data, form.amount.data, form.description.data or '')
    db.session.commit()
    return jsonify({'transaction': transaction.to_dict(), 'newBalance': new_balance})


@cash_bp.route('/balance')
def cash_balance():
    return jsonify({'balance': cash.get_balance()})


@cash_bp.route('/recent')
def recent_transactions():
    default_limit = current_app.config.get('RECENT_TRANSACTIONS_LIMIT', 10)
    limit = request.args.get('limit', default_limit, type=int)
    if limit is None or limit < 1:
        limit = default_limit
    return jsonify({'transactions': cash.get_recent(limit)})


@cash_bp.route('/export')
def export_transactions():
    transactions = (CashTransaction.query
                    .order_by(CashTransaction.created_at.asc(), CashTransaction.id.asc())
                    .all())
    output = to_excel([t.to_dict() for t in transactions], {
        'created_at': 'Date',
        'transaction_type': 'Type',
        'amount': 'Amount',
        'description': 'Description',
    }, 'Cash')
    return send_file(output, as_attachment=True, download_name='cash_transactions.xlsx',
                     mimetype=XLSX_MIMETYPE)
