from flask_wtf import FlaskForm
from wtforms import StringField, IntegerField, FloatField
from wtforms.validators import DataRequired, NumberRange, Optional

class InventoryForm(FlaskForm):
    supplier_name = StringField('Supplier name', validators=[DataRequired()])
    product_name = StringField('Product name', validators=[DataRequired()])
    product_id = StringField('Product code', validators=[DataRequired()])
    quantity = IntegerField('Quantity', default=0, validators=[Optional(), NumberRange(min=0)])
    price = FloatField('Price', default=0, validators=[Optional(), NumberRange(min=0)])
    payment_status = StringField('Payment status', default='unpaid')
    amount_paid = FloatField('Amount paid', default=0, validators=[Optional(), NumberRange(min=0)])

class ReduceStockForm(FlaskForm):
    quantity_sold = IntegerField('Quantity sold', validators=[Optional()])

class InventoryReturnForm(FlaskForm):
    return_quantity = IntegerField('Return quantity', validators=[Optional()])
    refund_amount = FloatField('Refund amount', validators=[Optional()])
    return_reason = StringField('Reason', default='Inventory return')
    return_notes = StringField('Notes', default='')
