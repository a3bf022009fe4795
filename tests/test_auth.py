"""Signup, password and OTP login, token rotation and logout."""

from datetime import datetime, timedelta

import pytest

from app.core.config import settings
from app.core.dependencies import ACCESS_COOKIE, REFRESH_COOKIE
from app.core.exceptions import BadRequestError, NotFoundError, UnauthorizedError
from app.db.schema import OtpCredential, User, UserRole
from app.services.user import UserService

from tests.conftest import DEFAULT_PASSWORD


def _signup(client, **overrides):
    payload = {"name": "Asha Rao", "email": "Asha@Example.com", "password": "secret123"}
    payload.update(overrides)
    return client.post("/api/auth/signup", json=payload)


def test_signup_defaults_to_client_and_lowercases_email(client):
    response = _signup(client)

    assert response.status_code == 201
    body = response.json()
    assert body["statusCode"] == 201
    assert body["success"] is True
    assert body["data"]["email"] == "asha@example.com"
    assert body["data"]["role"] == "client"
    assert "hashed_password" not in body["data"]


def test_signup_as_partner(client):
    response = _signup(client, role="partner")

    assert response.status_code == 201
    assert response.json()["data"]["role"] == "partner"


def test_signup_cannot_create_admin(client, session):
    response = _signup(client, role="admin")

    assert response.status_code == 403
    assert response.json()["message"] == "Admin accounts cannot be created through signup"
    assert UserService(session).get_user_by_email("asha@example.com") is None


def test_signup_duplicate_email_conflicts(client):
    _signup(client)

    response = _signup(client, email="ASHA@example.com")

    assert response.status_code == 409
    assert response.json()["message"] == "User with email already exists"


@pytest.mark.parametrize("overrides", [
    {"password": "12345"},
    {"email": "not-an-email"},
    {"phone": "12345"},
    {"name": ""},
])
def test_signup_validation(client, overrides):
    response = _signup(client, **overrides)

    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"


def test_login_sets_http_only_cookies(client, make_user):
    user = make_user(UserRole.CLIENT, email="asha@example.com")

    response = client.post(
        "/api/auth/login", json={"email": "ASHA@example.com", "password": DEFAULT_PASSWORD})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["id"] == str(user.id)
    assert data["access_token"] and data["refresh_token"]

    cookies = response.headers.get_list("set-cookie")
    access = next(c for c in cookies if c.startswith(f"{ACCESS_COOKIE}="))
    assert "HttpOnly" in access
    assert "samesite=strict" in access.lower()


def test_login_unknown_email(client):
    response = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "x"})

    assert response.status_code == 404
    assert response.json()["message"] == "User does not exist"


def test_login_wrong_password(client, make_user):
    make_user(UserRole.CLIENT, email="asha@example.com")

    response = client.post("/api/auth/login", json={"email": "asha@example.com", "password": "wrong"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid user credentials"


def test_profile_with_cookie_after_login(client, make_user):
    make_user(UserRole.PARTNER, email="lens@example.com")
    client.post("/api/auth/login", json={"email": "lens@example.com", "password": DEFAULT_PASSWORD})

    response = client.get("/api/auth/profile")

    assert response.status_code == 200
    assert response.json()["data"]["role"] == "partner"


def test_profile_requires_token(client):
    response = client.get("/api/auth/profile")

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized request"


def test_garbage_token_rejected(client):
    response = client.get("/api/auth/profile", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid access token"


def test_refresh_token_cannot_authenticate_requests(client, session, make_user):
    user = make_user(UserRole.CLIENT)
    refresh = UserService(session).generate_refresh_token(user)

    response = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {refresh}"})

    assert response.status_code == 401


def test_deactivated_user_rejected(client, make_user, auth_headers):
    user = make_user(UserRole.CLIENT, is_active=False)

    response = client.get("/api/auth/profile", headers=auth_headers(user))

    assert response.status_code == 401
    assert response.json()["message"] == "Account is deactivated"


def test_refresh_rotates_and_revokes_old_token(client, make_user):
    make_user(UserRole.CLIENT, email="asha@example.com")
    login = client.post("/api/auth/login", json={"email": "asha@example.com", "password": DEFAULT_PASSWORD})
    old_refresh = login.json()["data"]["refresh_token"]
    client.cookies.clear()

    rotated = client.post("/api/auth/refresh-token", json={"refresh_token": old_refresh})
    assert rotated.status_code == 200
    new_refresh = rotated.json()["data"]["refresh_token"]
    assert new_refresh != old_refresh
    client.cookies.clear()

    replay = client.post("/api/auth/refresh-token", json={"refresh_token": old_refresh})
    assert replay.status_code == 401
    assert replay.json()["message"] == "Refresh token is expired or used"


def test_refresh_from_cookie(client, make_user):
    make_user(UserRole.CLIENT, email="asha@example.com")
    client.post("/api/auth/login", json={"email": "asha@example.com", "password": DEFAULT_PASSWORD})
    assert client.cookies.get(REFRESH_COOKIE)

    response = client.post("/api/auth/refresh-token")

    assert response.status_code == 200


def test_refresh_without_token(client):
    response = client.post("/api/auth/refresh-token")

    assert response.status_code == 401
    assert response.json()["message"] == "Refresh token required"


def test_logout_clears_refresh_token(client, session, make_user):
    user = make_user(UserRole.CLIENT, email="asha@example.com")
    login = client.post("/api/auth/login", json={"email": "asha@example.com", "password": DEFAULT_PASSWORD})
    refresh = login.json()["data"]["refresh_token"]

    response = client.post("/api/auth/logout")
    assert response.status_code == 200

    session.expire_all()
    assert session.get(User, user.id).refresh_token is None

    client.cookies.clear()
    replay = client.post("/api/auth/refresh-token", json={"refresh_token": refresh})
    assert replay.status_code == 401


# ==========================================
# OTP
# ==========================================

def test_otp_login_flow(client, make_user, monkeypatch):
    monkeypatch.setattr(settings, "debug", True)
    make_user(UserRole.CLIENT, email="asha@example.com")

    sent = client.post("/api/auth/send-otp", json={"email": "asha@example.com"})
    assert sent.status_code == 200
    code = sent.json()["data"]["otp"]
    assert len(code) == 6

    verified = client.post("/api/auth/verify-otp", json={"email": "asha@example.com", "otp": code})
    assert verified.status_code == 200
    assert verified.json()["data"]["user"]["email"] == "asha@example.com"

    # A code is single use
    client.cookies.clear()
    replay = client.post("/api/auth/verify-otp", json={"email": "asha@example.com", "otp": code})
    assert replay.status_code == 400
    assert replay.json()["message"] == "No OTP found. Please request a new one."


def test_otp_not_echoed_outside_debug(client, make_user):
    make_user(UserRole.CLIENT, email="asha@example.com")

    sent = client.post("/api/auth/send-otp", json={"email": "asha@example.com"})

    assert sent.status_code == 200
    assert sent.json()["data"]["otp"] is None


def test_send_otp_unknown_user(client):
    response = client.post("/api/auth/send-otp", json={"email": "ghost@example.com"})

    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


def test_otp_locks_after_max_attempts(session, make_user):
    user = make_user(UserRole.CLIENT)
    service = UserService(session)
    service.issue_otp(user.email)

    for _ in range(settings.otp_max_attempts):
        with pytest.raises(BadRequestError) as exc:
            service.verify_otp(user.email, "000000x")
        assert exc.value.message == "Invalid OTP. Please try again."

    with pytest.raises(BadRequestError) as exc:
        service.verify_otp(user.email, "000000x")
    assert exc.value.message == "Too many failed attempts. Please request a new OTP."


def test_reissuing_otp_resets_attempts(session, make_user):
    user = make_user(UserRole.CLIENT)
    service = UserService(session)
    service.issue_otp(user.email)
    with pytest.raises(BadRequestError):
        service.verify_otp(user.email, "wrong")

    service.issue_otp(user.email)

    assert session.get(OtpCredential, user.id).attempts == 0


def test_expired_otp(session, make_user):
    user = make_user(UserRole.CLIENT)
    service = UserService(session)
    service.issue_otp(user.email)

    credential = session.get(OtpCredential, user.id)
    credential.expires_at = datetime.utcnow() - timedelta(seconds=1)
    session.add(credential)
    session.commit()

    with pytest.raises(BadRequestError) as exc:
        service.verify_otp(user.email, "123456")
    assert exc.value.message == "OTP has expired. Please request a new one."


def test_verify_otp_unknown_user(session):
    with pytest.raises(NotFoundError):
        UserService(session).verify_otp("ghost@example.com", "123456")


def test_authenticate_inactive_user(session, make_user):
    user = make_user(UserRole.CLIENT, is_active=False)

    with pytest.raises(UnauthorizedError):
        UserService(session).authenticate_user(user.email, DEFAULT_PASSWORD)
