"""
Login, bearer token checks and the health endpoint
"""
import pytest
from itsdangerous import URLSafeTimedSerializer

from loantracker.models import User
from loantracker.utils.tokens import TOKEN_SALT, bearer_token, issue_token, verify_token


def login(client, username, password):
    return client.post('/auth/login', json={'username': username, 'password': password})


def test_health_check(client):
    response = client.get('/')

    assert response.status_code == 200
    assert b'Loan API is running' in response.data


def test_login_success(client):
    response = login(client, 'Jasper', 'BMW123')

    assert response.status_code == 200
    body = response.get_json()
    assert body['username'] == 'Jasper'
    assert body['role'] == 'editor'
    assert isinstance(body['token'], str) and body['token']


def test_login_viewer_role(client):
    body = login(client, 'Guest', 'BMW123').get_json()

    assert body['role'] == 'viewer'


def test_wrong_password_and_unknown_user_look_the_same(client):
    wrong_password = login(client, 'Jasper', 'nope')
    unknown_user = login(client, 'Nobody', 'BMW123')

    assert wrong_password.status_code == 401
    assert unknown_user.status_code == 401
    assert wrong_password.get_json() == unknown_user.get_json()
    assert wrong_password.get_json()['message']


def test_username_is_case_sensitive(client):
    assert login(client, 'jasper', 'BMW123').status_code == 401


@pytest.mark.parametrize('body', [
    {},
    {'username': 'Jasper'},
    {'password': 'BMW123'},
    {'username': '', 'password': 'BMW123'},
])
def test_login_requires_both_fields(client, body):
    response = client.post('/auth/login', json=body)

    assert response.status_code == 400
    assert response.get_json()['message']


@pytest.mark.parametrize('data', ['[1, 2]', '"text"', '7', 'null'])
def test_login_body_must_be_an_object(client, data):
    response = client.post('/auth/login', data=data, content_type='application/json')

    assert response.status_code == 400
    assert response.get_json()['message'] == 'Request body must be a JSON object'


@pytest.mark.parametrize('body', [
    {'username': ['Jasper'], 'password': 'BMW123'},
    {'username': 'Jasper', 'password': 123},
    {'username': 'Jasper', 'password': {'value': 'BMW123'}},
])
def test_login_fields_must_be_strings(client, body):
    response = client.post('/auth/login', json=body)

    assert response.status_code == 400
    assert 'must be a string' in response.get_json()['message']


def test_blank_password_is_a_wrong_password(client):
    response = login(client, 'Jasper', '   ')

    assert response.status_code == 401
    assert response.get_json()['message'] == 'Invalid username or password'


def test_token_round_trip(ctx):
    user = User.query.filter_by(username='Frank').one()

    payload = verify_token(issue_token(user))

    assert payload == {'id': user.id, 'username': 'Frank'}


def test_bearer_token_parsing():
    assert bearer_token('Bearer abc.def') == 'abc.def'
    assert bearer_token('bearer abc') == 'abc'
    assert bearer_token('Basic abc') is None
    assert bearer_token('Bearer ') is None
    assert bearer_token(None) is None


def _rejections(app):
    with app.app_context():
        user = User.query.filter_by(username='Jasper').one()
        forged = URLSafeTimedSerializer('some-other-secret', salt=TOKEN_SALT).dumps(
            {'id': user.id, 'username': user.username})
        renamed = URLSafeTimedSerializer(app.config['SECRET_KEY'], salt=TOKEN_SALT).dumps(
            {'id': user.id, 'username': 'Gilbert'})
    return {
        'missing': {},
        'wrong scheme': {'Authorization': 'Token abc'},
        'garbage': {'Authorization': 'Bearer not-a-token'},
        'forged': {'Authorization': f'Bearer {forged}'},
        'identity mismatch': {'Authorization': f'Bearer {renamed}'},
    }


@pytest.mark.parametrize('path', ['/loan', '/payments'])
def test_protected_endpoints_reject_bad_credentials(app, client, path):
    messages = set()
    for headers in _rejections(app).values():
        response = client.get(path, headers=headers)
        assert response.status_code == 401
        messages.add(response.get_json()['message'])

    # Uninformative about which check failed
    assert len(messages) == 1


def test_mutation_rejects_bad_credentials_before_validation(client):
    response = client.post('/payments/1', json={'status': 'BOGUS'})

    assert response.status_code == 401


def test_expired_token_is_rejected(app, client, editor_headers):
    app.config['TOKEN_MAX_AGE'] = -1

    response = client.get('/loan', headers=editor_headers)

    assert response.status_code == 401
    assert response.get_json()['message']


def test_token_from_login_opens_the_api(client):
    token = login(client, 'Christian', 'BMW123').get_json()['token']

    response = client.get('/loan', headers={'Authorization': f'Bearer {token}'})

    assert response.status_code == 200
