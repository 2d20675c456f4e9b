"""Main routes"""
from loantracker.main import main_bp


@main_bp.route('/')
def index():
    """Liveness check"""
    return 'Loan API is running. Use /loan and /payments', 200, {'Content-Type': 'text/plain; charset=utf-8'}
