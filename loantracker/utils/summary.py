"""Derived loan totals, computed on every read and never stored"""
from decimal import Decimal
from loantracker.models import PaymentStatus


def summarize_loan(loan, payments):
    """Build the loan summary from the loan and its payment rows.

    Args:
        loan: Loan instance
        payments: iterable of Payment rows belonging to the loan

    Returns:
        dict with the JSON keys served by ``GET /loan``. ``percentPaid`` is not
        clamped and may exceed 100 when months are overpaid; ``outstanding``
        never drops below zero.
    """
    principal = Decimal(str(loan.principal))
    paid = [p for p in payments if p.status == PaymentStatus.PAID.value]

    total_paid = sum((Decimal(str(p.amount)) for p in paid), Decimal('0'))
    outstanding = max(principal - total_paid, Decimal('0'))
    percent_paid = total_paid / principal * 100

    return {
        'id': loan.id,
        'principal': float(principal),
        'monthlyPayment': float(loan.monthly_payment),
        'totalMonths': loan.total_months,
        'startDate': loan.start_date.isoformat() if loan.start_date else None,
        'totalPaid': float(total_paid),
        'outstanding': float(outstanding),
        'percentPaid': float(percent_paid),
        'paidMonths': len(paid),
        'remainingMonths': loan.total_months - len(paid),
    }
