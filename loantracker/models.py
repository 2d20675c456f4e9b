"""Database models for the loan tracker"""
import enum
from datetime import datetime, date
from werkzeug.security import generate_password_hash, check_password_hash
from flask_login import UserMixin
from loantracker import db, login_manager
from loantracker.utils.tokens import bearer_token, verify_token


class PaymentStatus(str, enum.Enum):
    PAID = 'PAID'
    UNPAID = 'UNPAID'


class UserRole(str, enum.Enum):
    VIEWER = 'viewer'
    EDITOR = 'editor'


# Permissions granted per role
ROLE_PERMISSIONS = {
    UserRole.VIEWER.value: set(),
    UserRole.EDITOR.value: {'edit_payments'},
}


@login_manager.request_loader
def load_user_from_request(req):
    payload = verify_token(bearer_token(req.headers.get('Authorization')))
    if payload is None:
        return None
    user = db.session.get(User, payload['id'])
    # Token must still match the stored identity
    if user is None or user.username != payload['username']:
        return None
    return user


def _iso(value):
    return value.isoformat() if value else None


class User(UserMixin, db.Model):
    """Roster member allowed to view the loan"""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=UserRole.VIEWER.value)  # viewer, editor
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def has_permission(self, permission):
        """Check if user's role grants a specific permission"""
        return permission in ROLE_PERMISSIONS.get(self.role, set())

    def __repr__(self):
        return f'<User {self.username}>'


class Loan(db.Model):
    """The single interest-free loan being repaid"""
    __tablename__ = 'loans'

    id = db.Column(db.Integer, primary_key=True)
    principal = db.Column(db.Numeric(15, 2), nullable=False)
    monthly_payment = db.Column(db.Numeric(15, 2), nullable=False)
    total_months = db.Column(db.Integer, nullable=False)
    start_date = db.Column(db.Date, nullable=False, default=date.today)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    payments = db.relationship('Payment', backref='loan', lazy='select',
                               order_by='Payment.month', cascade='all, delete-orphan')

    def missing_months(self, existing_months):
        """Months of the term that have no payment row yet"""
        existing = set(existing_months)
        return [month for month in range(1, self.total_months + 1) if month not in existing]

    def covers_month(self, month):
        return 1 <= month <= self.total_months

    def __repr__(self):
        return f'<Loan {self.id} {self.principal}/{self.total_months}m>'


class Payment(db.Model):
    """One month's installment and whether it has been paid"""
    __tablename__ = 'payments'
    __table_args__ = (
        db.UniqueConstraint('loan_id', 'month', name='uq_payments_loan_month'),
    )

    id = db.Column(db.Integer, primary_key=True)
    loan_id = db.Column(db.Integer, db.ForeignKey('loans.id'), nullable=False, index=True)
    month = db.Column(db.Integer, nullable=False)
    amount = db.Column(db.Numeric(15, 2), nullable=False)
    status = db.Column(db.String(10), nullable=False, default=PaymentStatus.UNPAID.value)  # PAID, UNPAID
    paid_at = db.Column(db.DateTime)
    note = db.Column(db.Text)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def apply_status(self, status, paid_at=None, note=None):
        """Set the status; paid_at is kept only for PAID rows"""
        self.status = status
        if status == PaymentStatus.PAID.value:
            self.paid_at = paid_at or datetime.utcnow()
        else:
            self.paid_at = None
        self.note = note

    def to_dict(self):
        return {
            'id': self.id,
            'loanId': self.loan_id,
            'month': self.month,
            'amount': float(self.amount),
            'status': self.status,
            'paidAt': _iso(self.paid_at),
            'note': self.note,
        }

    def __repr__(self):
        return f'<Payment {self.month} {self.status}>'
