from flask_wtf import FlaskForm
from wtforms import StringField, IntegerField, FloatField
from wtforms.validators import DataRequired, NumberRange, Optional

class CustomerForm(FlaskForm):
    customerName = StringField('Customer name', validators=[DataRequired()])
    productName = StringField('Product name', default='General Purchase')
    productId = StringField('Product code', validators=[Optional()])
    quantity = IntegerField('Quantity', default=1, validators=[Optional(), NumberRange(min=0)])
    price = FloatField('Price', default=0, validators=[Optional(), NumberRange(min=0)])
    paymentStatus = StringField('Payment status', default='unpaid')
    amountPaid = FloatField('Amount paid', default=0, validators=[Optional(), NumberRange(min=0)])
    # inventory row the purchase is taken from
    inventoryId = IntegerField('Inventory item', validators=[Optional()])
    email = StringField('Email', validators=[Optional()])
    phone = StringField('Phone', validators=[Optional()])
    address = StringField('Address', validators=[Optional()])

class CustomerProductForm(FlaskForm):
    product_name = StringField('Product name', validators=[DataRequired()])
    product_id = StringField('Product code', validators=[DataRequired()])
    quantity = IntegerField('Quantity', default=1, validators=[Optional(), NumberRange(min=0)])
    price = FloatField('Price', default=0, validators=[Optional(), NumberRange(min=0)])
    payment_status = StringField('Payment status', default='unpaid')
    amount_paid = FloatField('Amount paid', default=0, validators=[Optional(), NumberRange(min=0)])

class CustomerReturnForm(FlaskForm):
    returnQuantity = IntegerField('Return quantity', validators=[Optional()])
    refundAmount = FloatField('Refund amount', validators=[Optional()])
    reason = StringField('Reason', default='Customer return')
    notes = StringField('Notes', default='')
