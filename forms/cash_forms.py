from flask_wtf import FlaskForm
from wtforms import StringField, FloatField
from wtforms.validators import Optional

class CashUpdateForm(FlaskForm):
    action = StringField('Action', validators=[Optional()])
    amount = FloatField('Amount', validators=[Optional()])
    description = StringField('Description', default='')
