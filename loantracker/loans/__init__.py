from flask import Blueprint

loans_bp = Blueprint('loans', __name__)

from loantracker.loans import routes  # noqa: E402,F401
