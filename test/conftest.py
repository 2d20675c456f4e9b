"""
Pytest configuration and fixtures for the loan tracker test suite
"""
import os
import sys

import pytest

# Add project root to Python path to allow imports from 'loantracker'
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from loantracker import create_app, db
from loantracker.models import User
from loantracker.utils.helpers import ensure_loan, ensure_users
from loantracker.utils.tokens import issue_token


@pytest.fixture
def app():
    """App on a fresh in-memory database with the user roster provisioned.

    No app context stays pushed, so every test client request gets its own
    context and Flask-Login never reuses a user loaded by an earlier request.
    """
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        ensure_users()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    """Push an app context for tests that work on models directly"""
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def loan(ctx):
    return ensure_loan()


def _auth_headers(app, username):
    with app.app_context():
        user = User.query.filter_by(username=username).one()
        return {'Authorization': f'Bearer {issue_token(user)}'}


@pytest.fixture
def editor_headers(app):
    return _auth_headers(app, 'Jasper')


@pytest.fixture
def viewer_headers(app):
    return _auth_headers(app, 'Gilbert')


class FlaskResponse:
    """Just enough of requests.Response for LoanApiClient"""

    def __init__(self, response):
        self._response = response
        self.status_code = response.status_code
        self.ok = 200 <= response.status_code < 400
        self.reason = response.status

    def json(self):
        data = self._response.get_json()
        if data is None:
            raise ValueError('not JSON')
        return data


class FlaskSession:
    """Routes LoanApiClient calls into the Flask test client"""

    def __init__(self, test_client):
        self.test_client = test_client
        self.calls = []

    def request(self, method, url, json=None, headers=None, timeout=None):
        path = url.split('http://testserver', 1)[-1]
        self.calls.append((method, path, json))
        response = self.test_client.open(path, method=method, json=json, headers=headers or {})
        return FlaskResponse(response)


@pytest.fixture
def api_session(client):
    return FlaskSession(client)
