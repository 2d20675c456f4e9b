"""Loan and payment routes"""
from flask import jsonify, current_app
from flask_login import login_required, current_user
from sqlalchemy.exc import SQLAlchemyError
from loantracker import db
from loantracker.loans import loans_bp
from loantracker.loans.forms import PaymentStatusForm
from loantracker.models import Payment
from loantracker.utils.decorators import permission_required
from loantracker.utils.errors import ValidationError, error_response
from loantracker.utils.helpers import ensure_loan, get_payments, json_object
from loantracker.utils.summary import summarize_loan


@loans_bp.route('/loan')
@login_required
def loan_summary():
    """Loan details with derived totals"""
    try:
        loan = ensure_loan()
        return jsonify(summarize_loan(loan, get_payments(loan)))
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('Could not load loan')
        return error_response('Could not load loan', 500)


@loans_bp.route('/payments')
@login_required
def list_payments():
    """All payments, ascending by month"""
    try:
        loan = ensure_loan()
        return jsonify([payment.to_dict() for payment in get_payments(loan)])
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('Could not load payments')
        return error_response('Could not load payments', 500)


@loans_bp.route('/payments/<month>', methods=['POST'])
@login_required
@permission_required('edit_payments')
def update_payment(month):
    """Set the status of one month"""
    try:
        month = int(month)
    except ValueError:
        raise ValidationError('Month must be a whole number')

    json_object('status', 'paidAt', 'note')
    form = PaymentStatusForm()
    if not form.validate():
        raise ValidationError(form.first_error())

    try:
        loan = ensure_loan()
        if not loan.covers_month(month):
            raise ValidationError('Month is outside the loan term')

        payment = Payment.query.filter_by(loan_id=loan.id, month=month).first()
        if payment is None:
            # Only reachable when a row disappeared since the backfill
            payment = Payment(loan_id=loan.id, month=month, amount=loan.monthly_payment)
            db.session.add(payment)

        payment.apply_status(form.status.data, paid_at=form.paid_at, note=form.note.data)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('Could not update payment for month %s', month)
        return error_response('Could not update payment', 500)

    current_app.logger.info('%s set month %s to %s', current_user.username, month, payment.status)
    return jsonify(payment.to_dict())
