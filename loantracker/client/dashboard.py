"""Text dashboard over the loan API"""
import logging
from typing import Any, Dict, List, Optional

from loantracker.client.api import ApiError, LoanApiClient, SessionExpired
from loantracker.client import views

logger = logging.getLogger(__name__)

READ_ONLY_MESSAGE = 'Only editors can change payments. This dashboard is read-only.'
BAR_WIDTH = 40


class Dashboard:
    """Loan and payment state as seen by one logged-in user.

    Errors never escape: each one becomes a notice (``('error', text)``) that
    the caller shows once and drops via ``pop_notices``.
    """

    def __init__(self, api: LoanApiClient):
        self.api = api
        self.loan: Optional[Dict[str, Any]] = None
        self.payments: List[Dict[str, Any]] = []
        self.notices: List[tuple] = []

    @property
    def summary(self) -> Optional[Dict[str, Any]]:
        if self.loan is None:
            return None
        return views.derive_summary(self.loan, self.payments)

    def notify(self, level: str, message: str) -> None:
        self.notices.append((level, message))

    def pop_notices(self) -> List[tuple]:
        notices, self.notices = self.notices, []
        return notices

    def _fail(self, exc: ApiError) -> None:
        if isinstance(exc, SessionExpired):
            self.loan = None
            self.payments = []
            self.notify('error', 'Session expired. Log in again to continue.')
        else:
            self.notify('error', exc.message)
        logger.debug('API call failed: %s', exc)

    def login(self, username: str, password: str) -> bool:
        try:
            self.api.login(username, password)
        except ApiError as exc:
            self.notify('error', exc.message)
            return False
        self.notify('success', f'Logged in as {self.api.username}')
        return True

    def logout(self) -> None:
        self.api.logout()
        self.loan = None
        self.payments = []
        self.notify('info', 'You have been logged out')

    def load(self) -> bool:
        if not self.api.authenticated:
            self.notify('error', 'Log in first')
            return False
        try:
            self.loan = self.api.fetch_loan()
            self.payments = self.api.fetch_payments()
        except ApiError as exc:
            self._fail(exc)
            return False
        return True

    def find_payment(self, month: int) -> Optional[Dict[str, Any]]:
        for payment in self.payments:
            if payment['month'] == month:
                return payment
        return None

    def save(self, month: int, status: str, paid_at: Optional[str] = None, note: Optional[str] = None) -> bool:
        if not self.api.can_edit:
            self.notify('error', READ_ONLY_MESSAGE)
            return False
        try:
            self.api.update_payment(month, status, paid_at=paid_at, note=note)
        except ApiError as exc:
            self._fail(exc)
            return False
        self.notify('success', f'Month {month} updated')
        return self.load()

    def toggle(self, month: int) -> bool:
        if not self.api.can_edit:
            self.notify('error', READ_ONLY_MESSAGE)
            return False
        payment = self.find_payment(month)
        if payment is None:
            self.notify('error', f'No payment for month {month}')
            return False
        return self.save(month, views.next_status(payment),
                         paid_at=payment.get('paidAt'), note=payment.get('note'))

    def render_charts(self) -> str:
        """Remaining balance and per-month status as one-line text charts"""
        summary = self.summary
        if summary is None:
            return 'No data loaded.'

        balance = views.balance_series(summary['principal'], self.payments)
        status = views.status_series(self.payments)
        remaining = balance[-1]['remaining'] if balance else summary['principal']
        last = f'M{len(status)}'
        return '\n'.join([
            f"Remaining balance  {views.format_currency(summary['principal'], 0)}"
            f" -> {views.format_currency(remaining, 0)}",
            f"  M1 |{views.sparkline([row['remaining'] for row in balance], summary['principal'])}| {last}",
            f"Paid and open      {sum(1 for row in status if row['paid'])} paid,"
            f" {sum(1 for row in status if row['open'])} open",
            f"  M1 |{''.join('#' if row['paid'] else '.' for row in status)}| {last}",
        ])

    def render(self) -> str:
        summary = self.summary
        if summary is None:
            return 'No data loaded.'

        progress = views.progress_percent(summary['percentPaid'])
        filled = int(round(progress / 100 * BAR_WIDTH))
        lines = [
            f"Logged in as {self.api.username or 'unknown'}",
        ]
        if not self.api.can_edit:
            lines.append(READ_ONLY_MESSAGE)
        lines += [
            '',
            f"Outstanding      {views.format_currency(summary['outstanding'])}",
            f"Total paid       {views.format_currency(summary['totalPaid'])}",
            f"Principal        {views.format_currency(summary['principal'])}",
            f"Monthly payment  {views.format_currency(summary['monthlyPayment'])}",
            f"Paid months      {summary['paidMonths']} / {summary['totalMonths']}"
            f"  ({summary['remainingMonths']} to go)",
            f"Start date       {views.format_date(summary['startDate'])}",
            f"Status           {views.loan_status_label(summary['percentPaid'])}",
            f"[{'#' * filled}{'.' * (BAR_WIDTH - filled)}] {progress:.1f}%",
            '',
            self.render_charts(),
            '',
            f"{'Month':<6} {'Due':<9} {'Amount':>12}  {'Status':<8} {'Paid on':<10} Note",
        ]
        for payment in self.payments:
            lines.append(
                f"{payment['month']:<6} {views.month_label(summary['startDate'], payment['month']):<9} "
                f"{views.format_currency(payment['amount']):>12}  {payment['status']:<8} "
                f"{views.format_date(payment.get('paidAt')):<10} {payment.get('note') or ''}".rstrip()
            )
        return '\n'.join(lines)
