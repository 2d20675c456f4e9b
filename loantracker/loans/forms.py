"""Payment forms"""
from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField
from wtforms.validators import DataRequired, AnyOf, Optional, ValidationError
from loantracker.models import PaymentStatus
from loantracker.utils.helpers import parse_paid_at

STATUS_MESSAGE = 'Status must be PAID or UNPAID'


class PaymentStatusForm(FlaskForm):
    """Payment status form; field names follow the JSON body"""
    class Meta:
        csrf = False  # bearer token API

    status = StringField('Status', validators=[
        DataRequired(message=STATUS_MESSAGE),
        AnyOf([s.value for s in PaymentStatus], message=STATUS_MESSAGE)
    ])
    paidAt = StringField('Paid At', validators=[Optional()])
    note = TextAreaField('Note')

    def validate_paidAt(self, field):
        # Ignored for UNPAID, where paid_at is always cleared
        if self.status.data != PaymentStatus.PAID.value:
            return
        try:
            parse_paid_at(field.data)
        except (ValueError, OverflowError):
            raise ValidationError('paidAt must be an ISO date')

    @property
    def paid_at(self):
        if self.status.data != PaymentStatus.PAID.value:
            return None
        return parse_paid_at(self.paidAt.data)

    def first_error(self):
        for errors in self.errors.values():
            if errors:
                return errors[0]
        return 'Invalid request'
