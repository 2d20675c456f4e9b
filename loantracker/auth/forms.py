"""Authentication forms"""
from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField
from wtforms.validators import DataRequired, InputRequired


class LoginForm(FlaskForm):
    """Login form, filled from the JSON request body"""
    class Meta:
        csrf = False  # bearer token API

    username = StringField('Username', validators=[DataRequired()])
    password = PasswordField('Password', validators=[InputRequired()])
