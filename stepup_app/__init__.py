from flask import Blueprint

stepup_bp = Blueprint(
    "stepup",
    __name__,
)

from . import routes  # noqa
