"""
Derived loan totals: outstanding balance, percentage and month counts
"""
from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from loantracker.utils.summary import summarize_loan


def make_loan(principal='20000', monthly='330', months=60):
    return SimpleNamespace(
        id=1,
        principal=Decimal(principal),
        monthly_payment=Decimal(monthly),
        total_months=months,
        start_date=date(2024, 1, 15),
    )


def make_payments(paid_months, months=60, amount='330'):
    return [
        SimpleNamespace(month=m, amount=Decimal(amount), status='PAID' if m in paid_months else 'UNPAID')
        for m in range(1, months + 1)
    ]


def test_first_month_paid():
    summary = summarize_loan(make_loan(), make_payments({1}))

    assert summary['totalPaid'] == 330
    assert summary['outstanding'] == 19670
    assert summary['percentPaid'] == pytest.approx(1.65)
    assert summary['paidMonths'] == 1
    assert summary['remainingMonths'] == 59


def test_nothing_paid():
    summary = summarize_loan(make_loan(), make_payments(set()))

    assert summary['totalPaid'] == 0
    assert summary['outstanding'] == 20000
    assert summary['percentPaid'] == 0
    assert summary['remainingMonths'] == 60


def test_overpayment_keeps_outstanding_at_zero():
    # 60 x 400 = 24000 > 20000
    summary = summarize_loan(make_loan(), make_payments(set(range(1, 61)), amount='400'))

    assert summary['outstanding'] == 0
    assert summary['percentPaid'] == pytest.approx(120.0)
    assert summary['remainingMonths'] == 0


def test_summary_shape():
    summary = summarize_loan(make_loan(), make_payments({2, 3}))

    assert summary['principal'] == 20000.0
    assert summary['monthlyPayment'] == 330.0
    assert summary['totalMonths'] == 60
    assert summary['startDate'] == '2024-01-15'
    assert isinstance(summary['totalPaid'], float)


@pytest.mark.parametrize('paid', [set(), {1}, {5, 6, 7}, set(range(1, 31)), set(range(1, 61))])
def test_paid_and_remaining_months_add_up(paid):
    summary = summarize_loan(make_loan(), make_payments(paid))

    assert summary['paidMonths'] + summary['remainingMonths'] == summary['totalMonths']
    assert summary['outstanding'] >= 0
