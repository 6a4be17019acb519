"""Decorators for the auth blueprint."""

from functools import wraps

from flask import g

from runbike.core.session import require_session
from runbike.errors import ForbiddenError


def login_required(f=None, admin_required=False):
    """Reject the request unless a live session is attached.

    Usage:
    @login_required
    def protected_view():
        ...

    @login_required(admin_required=True)
    def admin_view():
        ...
    """

    def decorator(func):
        @wraps(func)
        def decorated_function(*args, **kwargs):
            current = require_session(g.get("auth_session"))
            if admin_required and not current.is_admin:
                raise ForbiddenError("Only the team admin can do that.")
            return func(*args, **kwargs)

        return decorated_function

    if f:
        return decorator(f)
    return decorator
