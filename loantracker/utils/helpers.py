"""Helper functions"""
import logging
from datetime import date, timezone
from decimal import Decimal
from dateutil import parser as date_parser
from flask import current_app, request
from loantracker import db
from loantracker.models import Loan, Payment, PaymentStatus, User, UserRole
from loantracker.utils.errors import ValidationError

logger = logging.getLogger(__name__)


def _new_payment(loan, month):
    return Payment(
        loan_id=loan.id,
        month=month,
        amount=loan.monthly_payment,
        status=PaymentStatus.UNPAID.value,
    )


def ensure_loan():
    """Return the loan, creating it or backfilling missing months first.

    Guarantees a payment row for every month ``1..total_months`` exactly once.
    Calling it again without a concurrent writer changes nothing.
    """
    loan = Loan.query.order_by(Loan.id).first()

    if loan is None:
        loan = Loan(
            principal=Decimal(str(current_app.config['LOAN_PRINCIPAL'])),
            monthly_payment=Decimal(str(current_app.config['LOAN_MONTHLY_PAYMENT'])),
            total_months=int(current_app.config['LOAN_TOTAL_MONTHS']),
            start_date=date.today(),
        )
        db.session.add(loan)
        db.session.flush()
        db.session.add_all([_new_payment(loan, month) for month in range(1, loan.total_months + 1)])
        db.session.commit()
        logger.info('Created loan %s with %s monthly payments', loan.id, loan.total_months)
        return loan

    existing_months = [month for (month,) in
                       db.session.query(Payment.month).filter(Payment.loan_id == loan.id).all()]
    if len(existing_months) < loan.total_months:
        missing = loan.missing_months(existing_months)
        if missing:
            db.session.add_all([_new_payment(loan, month) for month in missing])
            db.session.commit()
            logger.info('Backfilled months %s for loan %s', missing, loan.id)
        db.session.refresh(loan)

    return loan


def get_payments(loan):
    """Payments of the loan, ascending by month"""
    return Payment.query.filter_by(loan_id=loan.id).order_by(Payment.month.asc()).all()


def ensure_users():
    """Create roster users that do not exist yet; existing users stay untouched"""
    editors = set(current_app.config['EDITOR_USERNAMES'])
    created = []

    for username in current_app.config['USER_ROSTER']:
        if User.query.filter_by(username=username).first():
            continue
        user = User(
            username=username,
            role=UserRole.EDITOR.value if username in editors else UserRole.VIEWER.value,
        )
        user.set_password(current_app.config['ROSTER_PASSWORD'])
        db.session.add(user)
        created.append(username)

    if created:
        db.session.commit()
        logger.info('Provisioned users: %s', ', '.join(created))
    return created


def seed_database():
    """Create tables, the user roster and the loan schedule"""
    db.create_all()
    ensure_users()
    return ensure_loan()


def parse_paid_at(value):
    """Parse an ISO date or datetime string; blank means "not supplied"

    Raises:
        ValueError: if the value is not a recognisable date
    """
    if value is None or str(value).strip() == '':
        return None
    parsed = date_parser.isoparse(str(value).strip())
    # Stored as naive UTC, like every other timestamp column
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def json_object(*text_fields):
    """Return the JSON request body, which must be an object.

    Each of ``text_fields`` may be missing or null, otherwise it must be a
    string. Required fields are left to the form validators.

    Raises:
        ValidationError: if the body or one of the fields has the wrong type
    """
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError('Request body must be a JSON object')
    for name in text_fields:
        value = body.get(name)
        if value is not None and not isinstance(value, str):
            raise ValidationError(f'{name} must be a string')
    return body
