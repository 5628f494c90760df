from flask_wtf import FlaskForm
from wtforms import StringField, IntegerField, FloatField
from wtforms.validators import DataRequired, NumberRange, Optional

class SupplierForm(FlaskForm):
    supplierName = StringField('Supplier name', validators=[DataRequired()])
    productName = StringField('Product name', validators=[DataRequired()])
    productId = StringField('Product code', validators=[DataRequired()])
    quantity = IntegerField('Quantity', default=0, validators=[Optional(), NumberRange(min=0)])
    price = FloatField('Price', default=0, validators=[Optional(), NumberRange(min=0)])
    paymentStatus = StringField('Payment status', default='unpaid')
    amountPaid = FloatField('Amount paid', default=0, validators=[Optional(), NumberRange(min=0)])
    email = StringField('Email', validators=[Optional()])
    phone = StringField('Phone', validators=[Optional()])
    address = StringField('Address', validators=[Optional()])
    contactPerson = StringField('Contact person', validators=[Optional()])
