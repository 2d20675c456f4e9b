"""Signed, time-limited bearer tokens"""
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired
from flask import current_app

TOKEN_SALT = 'auth-token'


def _serializer():
    return URLSafeTimedSerializer(current_app.config['SECRET_KEY'], salt=TOKEN_SALT)


def issue_token(user):
    """Sign the user's identity into a token"""
    return _serializer().dumps({'id': user.id, 'username': user.username})


def verify_token(token):
    """Return the token payload, or None when it is invalid or expired"""
    if not token:
        return None
    try:
        payload = _serializer().loads(token, max_age=current_app.config['TOKEN_MAX_AGE'])
    except SignatureExpired:
        current_app.logger.info('Rejected expired token')
        return None
    except BadSignature:
        current_app.logger.info('Rejected token with bad signature')
        return None

    if not isinstance(payload, dict) or 'id' not in payload or 'username' not in payload:
        return None
    return payload


def bearer_token(header):
    """Extract the token from an ``Authorization: Bearer ...`` header"""
    if not header:
        return None
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer':
        return None
    return token.strip() or None
