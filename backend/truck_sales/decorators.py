# Overview: Request decorators for API routes.

from functools import wraps
from flask import request, jsonify, g

from .services import session_service


def require_admin(f):
    """
    Require a signed-in admin.

    Any user the session service resolves counts as an admin; there is no
    finer-grained role check. Sets g.current_user for the route.

    Returns 401 {"error": "Unauthorized"} when the request carries no valid
    bearer token or auth cookie.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = session_service.get_current_user(request)
        if user is None:
            return jsonify({"error": "Unauthorized"}), 401

        g.current_user = user
        return f(*args, **kwargs)

    return decorated_function
