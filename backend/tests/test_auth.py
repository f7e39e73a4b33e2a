"""
Admin authentication tests.

Verifies:
- Login with username or email; bad credentials are 401
- Bearer header and auth cookie both authenticate
- Logout, expiry and deactivation end a session
- Password strength rules
"""

from datetime import timedelta

import pytest

from conftest import ADMIN_PASSWORD, auth_headers, get_auth_token
from truck_sales.extensions import db
from truck_sales.models import SessionToken
from truck_sales.services import auth_service, session_service
from truck_sales.services.auth_service import PasswordValidationError
from truck_sales.time_utils import utcnow


class TestLogin:

    def test_login_returns_token_and_cookie(self, client, admin_user):
        resp = client.post("/api/auth/login", json={"username": "admin", "password": ADMIN_PASSWORD})

        assert resp.status_code == 200
        body = resp.get_json()
        assert body["user"]["username"] == "admin"
        assert len(body["token"]) == 64
        cookie = resp.headers.get("Set-Cookie")
        assert cookie.startswith(f"auth-token={body['token']}")
        assert "HttpOnly" in cookie

    def test_login_by_email(self, client, admin_user):
        assert get_auth_token(client, "admin@example.com", ADMIN_PASSWORD)

    def test_wrong_password(self, client, admin_user):
        resp = client.post("/api/auth/login", json={"username": "admin", "password": "Wrong123!"})

        assert resp.status_code == 401
        assert resp.get_json() == {"error": "Invalid credentials"}

    def test_unknown_user(self, client):
        resp = client.post("/api/auth/login", json={"username": "ghost", "password": ADMIN_PASSWORD})
        assert resp.status_code == 401

    def test_missing_fields(self, client):
        assert client.post("/api/auth/login", json={"username": "admin"}).status_code == 400
        assert client.post("/api/auth/login", data="nope", content_type="text/plain").status_code == 400

    def test_token_is_stored_hashed(self, client, admin_user):
        token = get_auth_token(client, "admin", ADMIN_PASSWORD)

        row = db.session.query(SessionToken).one()
        assert row.token_hash == session_service.hash_token(token)
        assert row.token_hash != token


class TestSession:

    def test_me_with_bearer(self, client, admin_headers):
        resp = client.get("/api/auth/me", headers=admin_headers)

        assert resp.status_code == 200
        assert resp.get_json()["user"]["email"] == "admin@example.com"

    def test_me_with_cookie(self, client, admin_token):
        resp = client.get("/api/auth/me", headers={"Cookie": f"auth-token={admin_token}"})
        assert resp.status_code == 200

    def test_me_without_session(self, client):
        assert client.get("/api/auth/me").status_code == 401

    def test_logout_revokes(self, client, admin_token):
        headers = auth_headers(admin_token)

        assert client.post("/api/auth/logout", headers=headers).status_code == 200
        assert client.get("/api/auth/me", headers=headers).status_code == 401

    def test_expired_session(self, client, admin_token):
        row = db.session.query(SessionToken).one()
        row.expires_at = utcnow() - timedelta(minutes=1)
        db.session.commit()

        assert client.get("/api/auth/me", headers=auth_headers(admin_token)).status_code == 401

    def test_deactivated_user(self, client, admin_user, admin_token):
        admin_user.is_active = False
        db.session.commit()

        assert client.get("/api/auth/me", headers=auth_headers(admin_token)).status_code == 401

    def test_cleanup_removes_expired_and_revoked(self, admin_user):
        _live, _ = session_service.create_session(admin_user.id)
        expired, _ = session_service.create_session(admin_user.id)
        _revoked, revoked_token = session_service.create_session(admin_user.id)
        expired.expires_at = utcnow() - timedelta(hours=1)
        db.session.commit()
        session_service.revoke_session(revoked_token)

        assert session_service.cleanup_expired_sessions() == 2
        assert db.session.query(SessionToken).count() == 1


class TestPasswords:

    @pytest.mark.parametrize(
        "password",
        ["Short1!", "alllowercase1!", "ALLUPPERCASE1!", "NoDigitsHere!", "NoSpecial123"],
    )
    def test_weak_passwords_rejected(self, password):
        with pytest.raises(PasswordValidationError):
            auth_service.validate_password_strength(password)

    def test_hash_and_verify(self):
        hashed = auth_service.hash_password("Password123!")

        assert hashed != "Password123!"
        assert auth_service.verify_password("Password123!", hashed)
        assert not auth_service.verify_password("Password124!", hashed)

    def test_malformed_hash_does_not_verify(self):
        assert not auth_service.verify_password("Password123!", "not-a-bcrypt-hash")

    def test_duplicate_username(self, admin_user):
        with pytest.raises(ValueError):
            auth_service.create_user(username="admin", email="other@example.com", password=ADMIN_PASSWORD)
