from flask import Blueprint

bp = Blueprint("faculty", __name__)

from . import routes  # noqa: E402,F401
