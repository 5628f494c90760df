from flask_wtf import FlaskForm
from wtforms import StringField, FloatField
from wtforms.validators import Optional, NumberRange, AnyOf

RETURN_STATUSES = ['pending', 'completed', 'cancelled']

class ReturnEditForm(FlaskForm):
    customer_supplier_name = StringField('Customer / supplier', validators=[Optional()])
    total_amount = FloatField('Total amount', validators=[Optional(), NumberRange(min=0)])
    status = StringField('Status', validators=[Optional(), AnyOf(RETURN_STATUSES)])
    reason = StringField('Reason', validators=[Optional()])
    notes = StringField('Notes', validators=[Optional()])
