#!/usr/bin/env python3
"""Application entry point"""
import getpass
import os
import sys

USAGE = """Available commands:
  serve                                 run the API (default)
  init-db                               create tables, users and the loan schedule
  login <username>                      log in and remember the token
  logout                                forget the stored token
  dashboard                             show the loan dashboard
  charts                                show the balance and status charts
  mark <month> <PAID|UNPAID> [paidAt] [note]
  toggle <month>"""


def _config():
    from config import config
    return config[os.getenv('FLASK_ENV') or 'default']


def init_database():
    """Initialize the database"""
    from loantracker import create_app
    from loantracker.utils.helpers import seed_database
    app = create_app(os.getenv('FLASK_ENV') or 'development')
    with app.app_context():
        loan = seed_database()
        print("Database initialized! Loan {} covers {} months.".format(loan.id, loan.total_months))


def serve():
    from loantracker import create_app
    from loantracker.utils.helpers import seed_database
    app = create_app(os.getenv('FLASK_ENV') or 'development')
    # Seed once at startup, not from a request
    with app.app_context():
        seed_database()
    app.run(host='0.0.0.0', port=app.config['PORT'], debug=app.config.get('DEBUG', False))


def _dashboard():
    from loantracker.logging_config import configure_logging
    from loantracker.client.api import LoanApiClient, TokenStore
    from loantracker.client.dashboard import Dashboard
    cfg = _config()
    configure_logging(cfg.LOG_LEVEL)
    api = LoanApiClient(cfg.API_URL, store=TokenStore(cfg.TOKEN_FILE))
    return Dashboard(api)


def _flush(dashboard):
    for level, message in dashboard.pop_notices():
        print("[{}] {}".format(level, message), file=sys.stderr if level == 'error' else sys.stdout)


def _month(value, usage):
    try:
        return int(value)
    except ValueError:
        print(usage)
        sys.exit(1)


def client_command(command, args):
    dashboard = _dashboard()

    if command == 'login':
        if not args:
            print("Usage: login <username>")
            sys.exit(1)
        ok = dashboard.login(args[0], getpass.getpass("Password: "))
    elif command == 'logout':
        dashboard.logout()
        ok = True
    elif command == 'dashboard':
        ok = dashboard.load()
        if ok:
            print(dashboard.render())
    elif command == 'charts':
        ok = dashboard.load()
        if ok:
            print(dashboard.render_charts())
    elif command == 'mark':
        if len(args) < 2:
            print("Usage: mark <month> <PAID|UNPAID> [paidAt] [note]")
            sys.exit(1)
        paid_at = args[2] if len(args) > 2 and args[2] else None
        note = args[3] if len(args) > 3 else None
        month = _month(args[0], "Usage: mark <month> <PAID|UNPAID> [paidAt] [note]")
        ok = dashboard.save(month, args[1].upper(), paid_at=paid_at, note=note)
    elif command == 'toggle':
        if not args:
            print("Usage: toggle <month>")
            sys.exit(1)
        month = _month(args[0], "Usage: toggle <month>")
        ok = dashboard.load() and dashboard.toggle(month)
    else:
        ok = False

    _flush(dashboard)
    if not ok:
        sys.exit(1)


if __name__ == '__main__':
    # Handle command-line arguments
    if len(sys.argv) > 1:
        command = sys.argv[1]
        if command == 'serve':
            serve()
        elif command == 'init-db':
            init_database()
        elif command in ('login', 'logout', 'dashboard', 'charts', 'mark', 'toggle'):
            client_command(command, sys.argv[2:])
        else:
            print("Unknown command: {}".format(command))
            print(USAGE)
            sys.exit(1)
    else:
        serve()
