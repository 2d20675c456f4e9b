"""Display values derived from the raw API payloads"""
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PAID = 'PAID'
UNPAID = 'UNPAID'

MONTH_NAMES = ['jan', 'feb', 'mrt', 'apr', 'mei', 'jun', 'jul', 'aug', 'sep', 'okt', 'nov', 'dec']

SPARK_LEVELS = ' ▁▂▃▄▅▆▇█'


def _decimal(value: Any) -> Decimal:
    return Decimal(str(value))


def derive_summary(loan: Dict[str, Any], payments: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    """Recompute the loan totals from the payment list.

    Gives immediate feedback after an edit, before the next ``GET /loan``.
    Produces the same numbers as the server for the same payments.
    """
    principal = _decimal(loan['principal'])
    paid = [p for p in payments if p.get('status') == PAID]
    total_paid = sum((_decimal(p['amount']) for p in paid), Decimal('0'))

    derived = dict(loan)
    derived.update({
        'totalPaid': float(total_paid),
        'outstanding': float(max(principal - total_paid, Decimal('0'))),
        'percentPaid': float(total_paid / principal * 100),
        'paidMonths': len(paid),
        'remainingMonths': int(loan['totalMonths']) - len(paid),
    })
    return derived


def progress_percent(percent_paid: float) -> float:
    """Progress bar width, clamped to 0..100"""
    return min(max(percent_paid, 0.0), 100.0)


def loan_status_label(percent_paid: float) -> str:
    return 'Fully paid' if progress_percent(percent_paid) >= 100 else 'Active'


def parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    return date_parser.isoparse(value).date()


def month_date(start_date: Any, month: int) -> date:
    """Calendar date on which installment ``month`` (1-based) falls"""
    start = parse_date(start_date) if isinstance(start_date, str) else start_date
    return start + relativedelta(months=month - 1)


def month_label(start_date: Any, month: int) -> str:
    due = month_date(start_date, month)
    return f'{MONTH_NAMES[due.month - 1]} {due.year}'


def format_currency(value: float, decimals: int = 2) -> str:
    """Format an amount the nl-NL way, e.g. ``€ 19.670,00``"""
    text = f'{abs(value):,.{decimals}f}'
    text = text.replace(',', '_').replace('.', ',').replace('_', '.')
    sign = '-' if value < 0 else ''
    return f'{sign}€ {text}'


def format_date(value: Optional[str]) -> str:
    parsed = parse_date(value)
    return parsed.strftime('%d-%m-%Y') if parsed else '-'


def balance_series(principal: float, payments: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Cumulative paid and remaining balance after each month"""
    principal_dec = _decimal(principal)
    rows = []
    paid_so_far = Decimal('0')
    for index, payment in enumerate(sorted(payments, key=lambda p: p['month'])):
        if payment.get('status') == PAID:
            paid_so_far += _decimal(payment['amount'])
        rows.append({
            'name': f'M{index + 1}',
            'month': payment['month'],
            'paid': float(paid_so_far),
            'remaining': float(max(principal_dec - paid_so_far, Decimal('0'))),
            'unpaid': float(principal_dec - paid_so_far),
        })
    return rows


def status_series(payments: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Per month: amount paid or still open"""
    return [
        {
            'name': f"M{p['month']}",
            'paid': p['amount'] if p.get('status') == PAID else 0,
            'open': p['amount'] if p.get('status') == UNPAID else 0,
        }
        for p in payments
    ]


def sparkline(values: Sequence[float], maximum: float) -> str:
    """One block character per value, scaled against ``maximum``"""
    if maximum <= 0:
        return ''
    top = len(SPARK_LEVELS) - 1
    return ''.join(
        SPARK_LEVELS[int(round(min(max(value, 0), maximum) / maximum * top))]
        for value in values
    )


def next_status(payment: Dict[str, Any]) -> str:
    return UNPAID if payment.get('status') == PAID else PAID
