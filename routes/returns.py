from flask import Blueprint, jsonify, send_file

from forms import form_from_json, validated
from forms.return_forms import ReturnEditForm
from models import db
from models.returns import ProductReturn
from services.export import to_excel, XLSX_MIMETYPE
from services.lines import get_or_404

returns_bp = Blueprint('returns', __name__, url_prefix='/api/returns')


def ordered_returns():
    return (ProductReturn.query
            .order_by(ProductReturn.return_date.desc(), ProductReturn.created_at.desc(),
                      ProductReturn.id.desc())
            .all())


@returns_bp.route('/', methods=['GET'])
def list_returns():
    return jsonify([r.to_dict() for r in ordered_returns()])


@returns_bp.route('/export')
def export_returns():
    output = to_excel([r.to_dict() for r in ordered_returns()], {
        'return_id': 'Return',
        'return_type': 'Type',
        'return_date': 'Date',
        'customer_supplier_name': 'Customer / supplier',
        'original_order_id': 'Product code',
        'product_name': 'Product',
        'total_amount': 'Refund',
        'status': 'Status',
        'reason': 'Reason',
        'notes': 'Notes',
    }, 'Returns')
    return send_file(output, as_attachment=True, download_name='returns.xlsx',
                     mimetype=XLSX_MIMETYPE)


@returns_bp.route('/<int:record_id>', methods=['GET'])
def get_return(record_id):
    record = get_or_404(ProductReturn, record_id, 'Return not found')
    return jsonify(record.to_dict(with_items=True))


@returns_bp.route('/<int:record_id>', methods=['PUT'])
def update_return(record_id):
    """Administrative edit. Lines, stock and cash are left as they are."""
    record = get_or_404(ProductReturn, record_id, 'Return not found')
    form = validated(form_from_json(ReturnEditForm))
    if form.customer_supplier_name.raw_data:
        record.party_name = form.customer_supplier_name.data
    if form.total_amount.raw_data:
        record.total_amount = form.total_amount.data
    if form.status.raw_data:
        record.status = form.status.data
    if form.reason.raw_data:
        record.reason = form.reason.data
    if form.notes.raw_data:
        record.notes = form.notes.data
    db.session.commit()
    return jsonify(record.to_dict(with_items=True))


@returns_bp.route('/<int:record_id>', methods=['DELETE'])
def delete_return(record_id):
    record = get_or_404(ProductReturn, record_id, 'Return not found')
    db.session.delete(record)
    db.session.commit()
    return jsonify({'message': 'Return deleted successfully'})
