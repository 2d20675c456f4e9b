"""Utility decorators"""
from functools import wraps
from flask import current_app
from flask_login import current_user
from loantracker.utils.errors import AuthenticationError, AuthorizationError


def permission_required(permission):
    """Decorator to check if user has required permission"""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                raise AuthenticationError()

            if not current_user.has_permission(permission):
                current_app.logger.warning('User %s denied permission %s', current_user.username, permission)
                raise AuthorizationError('Only editors may change payments')

            return f(*args, **kwargs)
        return decorated_function
    return decorator
