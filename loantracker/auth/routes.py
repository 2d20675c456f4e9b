"""Authentication routes"""
from flask import jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError
from loantracker import login_manager
from loantracker.auth import auth_bp
from loantracker.auth.forms import LoginForm
from loantracker.models import User
from loantracker.utils.helpers import json_object
from loantracker.utils.errors import (
    AUTHENTICATION_MESSAGE, AuthenticationError, ValidationError, error_response
)
from loantracker.utils.tokens import issue_token


@login_manager.unauthorized_handler
def unauthorized():
    """Missing, malformed and expired tokens all look the same"""
    return error_response(AUTHENTICATION_MESSAGE, 401)


@auth_bp.route('/login', methods=['POST'])
def login():
    """Exchange username and password for a bearer token"""
    json_object('username', 'password')
    form = LoginForm()
    if not form.validate():
        raise ValidationError('Username and password are required')

    try:
        user = User.query.filter_by(username=form.username.data).first()
    except SQLAlchemyError:
        current_app.logger.exception('Login lookup failed')
        return error_response('Could not log in', 500)

    # Same answer for unknown users and wrong passwords
    if user is None or not user.check_password(form.password.data):
        current_app.logger.info('Failed login for %r', form.username.data)
        raise AuthenticationError('Invalid username or password')

    current_app.logger.info('User %s logged in', user.username)
    return jsonify({
        'token': issue_token(user),
        'username': user.username,
        'role': user.role,
    })
