from flask_wtf import FlaskForm
from wtforms import StringField, DateTimeField
from wtforms.validators import DataRequired, Optional

# Submitted by the scanner page via fetch(), as JSON or url-encoded.
# There is no session to bind a CSRF token to.

def _clean(value):
    # JSON bodies may carry numbers, e.g. a phone typed without quotes
    if value is None:
        return None
    return str(value).strip()

class ScanForm(FlaskForm):
    class Meta:
        csrf = False

    store = StringField('Store code', filters=[_clean], validators=[DataRequired()])
    name = StringField('Customer name', filters=[_clean], validators=[DataRequired()])
    phone = StringField('Phone', filters=[_clean], validators=[DataRequired()])
    barcode = StringField('Barcode', filters=[_clean], validators=[DataRequired()])
    image = StringField('Image', validators=[Optional()])

class RecordForm(FlaskForm):
    class Meta:
        csrf = False

    store = StringField('Store code', filters=[_clean], validators=[Optional()])
    name = StringField('Customer name', filters=[_clean], validators=[DataRequired()])
    phone = StringField('Phone', filters=[_clean], validators=[DataRequired()])
    barcode = StringField('Barcode', filters=[_clean], validators=[DataRequired()])
    image = StringField('Image', validators=[Optional()])
    timestamp = DateTimeField('Timestamp', format='%Y-%m-%d %H:%M:%S', validators=[Optional()])
