# Overview: Flask API routes for admin auth operations; parses input and returns JSON responses.

"""
Admin authentication routes.

Self-registration does not exist; accounts come from `flask users create`.
Login returns a bearer token and also sets it as an httpOnly cookie.
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..services import auth_service
from ..services import session_service
from ..services.session_service import SESSION_ABSOLUTE_TIMEOUT
from ..decorators import require_admin


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
def login_route():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid request data"}), 400

    username = data.get("username")
    password = data.get("password")
    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        return jsonify({"error": "username and password required"}), 400

    try:
        user = auth_service.authenticate(username.strip(), password)
        if not user:
            return jsonify({"error": "Invalid credentials"}), 401

        _session, token = session_service.create_session(
            user_id=user.id,
            user_agent=request.headers.get("User-Agent"),
        )
    except Exception:
        current_app.logger.exception("Failed to login user")
        return jsonify({"error": "Internal server error"}), 500

    response = jsonify({"user": user.to_dict(), "token": token})
    response.set_cookie(
        current_app.config["AUTH_COOKIE_NAME"],
        token,
        max_age=int(SESSION_ABSOLUTE_TIMEOUT.total_seconds()),
        httponly=True,
        secure=not current_app.debug and not current_app.testing,
        samesite="Lax",
    )
    return response


@auth_bp.post("/logout")
@require_admin
def logout_route():
    token = session_service.token_from_request(request)
    try:
        session_service.revoke_session(token)
    except Exception:
        current_app.logger.exception("Failed to logout user")
        return jsonify({"error": "Internal server error"}), 500

    response = jsonify({"message": "Logged out"})
    response.delete_cookie(current_app.config["AUTH_COOKIE_NAME"])
    return response


@auth_bp.get("/me")
@require_admin
def me_route():
    return jsonify({"user": g.current_user.to_dict()})
