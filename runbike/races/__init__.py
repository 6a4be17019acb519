"""The races blueprint."""

from flask import Blueprint

bp = Blueprint("races", __name__, url_prefix="/races")

from . import routes  # noqa: E402

__all__ = ["routes"]
