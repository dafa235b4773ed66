from functools import wraps
from flask import g

from noodlenook.domain.exceptions import AuthenticationError, AuthorizationError


def login_required(fn):
    """Requires a resolved user; pair with @jwt_required() for token checks."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if getattr(g, "current_user", None) is None:
            raise AuthenticationError("Authentication required")

        return fn(*args, **kwargs)
    return wrapper


def roles_required(*allowed_roles):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            user = getattr(g, "current_user", None)

            if user is None:
                raise AuthenticationError("Authentication required")

            if user.role not in allowed_roles:
                raise AuthorizationError("Insufficient permissions")

            return fn(*args, **kwargs)
        return wrapper
    return decorator
