"""End-to-end tests for ``/api/v1/auth`` over the Flask test client."""

from __future__ import annotations

from datetime import timedelta

import pytest
from flask_jwt_extended import create_refresh_token, decode_token
from lms_auth import create_app
from lms_auth.core.config import TestingConfig
from lms_auth.core.extensions import db as _db

from tests.factories.user import DEFAULT_PASSWORD, UserFactory
from tests.helpers.auth import bearer, expired_token, issue_token
from tests.helpers.http import API, login, problem, register

SESSION_KEYS = {"userId", "fullName", "email", "role", "token", "refreshToken", "tokenExpiration"}


def _refresh(client, token: str):
    return client.post(f"{API}/auth/refresh", json={"refreshToken": token})


def _revoke(client, token: str, access: str | None):
    headers = bearer(access) if access else {}
    return client.post(f"{API}/auth/revoke", json={"refreshToken": token}, headers=headers)


# --------------------------------------------------------------------------- #
# Register
# --------------------------------------------------------------------------- #


class TestRegister:
    def test_returns_session_with_signed_token(self, client):
        resp = register(client, email="Amina@Example.com", role="Instructor")

        assert resp.status_code == 200
        body = resp.get_json()
        assert set(body) == SESSION_KEYS
        assert body["email"] == "amina@example.com"
        assert body["role"] == "Instructor"
        assert "password" not in body

        claims = decode_token(body["token"])
        assert claims["sub"] == str(body["userId"])
        assert claims["name"] == "Amina Yusuf"
        assert claims["email"] == "amina@example.com"
        assert claims["role"] == "Instructor"
        assert claims["iss"] == "lms-auth"
        assert claims["aud"] == "lms-clients"
        assert claims["type"] == "access"
        assert claims["jti"]

    def test_duplicate_email_is_409(self, client):
        assert register(client, email="dup@example.com").status_code == 200

        resp = register(client, email="DUP@example.com")

        assert resp.status_code == 409
        assert problem(resp)["detail"] == "Email is already registered"

    def test_superadmin_cannot_be_self_assigned(self, client):
        resp = register(client, email="boss@example.com", role="SuperAdmin")
        assert resp.status_code == 400
        assert problem(resp)["code"] == "validation_error"

    @pytest.mark.parametrize(
        "payload",
        [
            {"email": "x@example.com", "password": "Secret6", "role": "Student"},
            {"fullName": "X", "email": "not-an-email", "password": "Secret6", "role": "Student"},
            {"fullName": "X", "email": "x@example.com", "password": "short", "role": "Student"},
            {"fullName": "", "email": "x@example.com", "password": "Secret6", "role": "Student"},
            {"fullName": "X", "email": "x@example.com", "password": "Secret6"},
        ],
    )
    def test_invalid_payload_is_400(self, client, payload):
        resp = client.post(f"{API}/auth/register", json=payload)
        body = problem(resp)
        assert resp.status_code == 400
        assert body["details"]["errors"]

    def test_missing_body_is_400(self, client):
        resp = client.post(f"{API}/auth/register")
        assert resp.status_code == 400


# --------------------------------------------------------------------------- #
# Login
# --------------------------------------------------------------------------- #


class TestLogin:
    def test_login_issues_distinct_sessions(self, client):
        register(client, email="kofi@example.com")

        first = login(client, email="kofi@example.com")
        second = login(client, email="KOFI@example.com")

        assert first.status_code == second.status_code == 200
        assert first.get_json()["refreshToken"] != second.get_json()["refreshToken"]
        assert set(first.get_json()) == SESSION_KEYS

    @pytest.mark.parametrize(
        ("email", "password"),
        [("kofi@example.com", "WrongPass"), ("ghost@example.com", "Secret6")],
    )
    def test_bad_credentials_are_401_with_same_message(self, client, email, password):
        register(client, email="kofi@example.com")

        resp = login(client, email=email, password=password)

        assert resp.status_code == 401
        assert problem(resp)["detail"] == "Invalid email or password"

    def test_deactivated_account_cannot_login(self, client, session):
        UserFactory(email="off@example.com", is_active=False)
        session.commit()

        resp = login(client, email="off@example.com", password=DEFAULT_PASSWORD)

        assert resp.status_code == 401
        assert problem(resp)["detail"] == "Invalid email or password"


# --------------------------------------------------------------------------- #
# Refresh & revoke
# --------------------------------------------------------------------------- #


class TestRefreshAndRevoke:
    def test_refresh_rotates_and_old_token_dies(self, client):
        original = register(client, email="r@example.com").get_json()

        rotated = _refresh(client, original["refreshToken"])
        assert rotated.status_code == 200
        body = rotated.get_json()
        assert body["refreshToken"] != original["refreshToken"]
        assert body["userId"] == original["userId"]

        replay = _refresh(client, original["refreshToken"])
        assert replay.status_code == 401
        assert problem(replay)["detail"] == "Invalid or expired refresh token"

        assert _refresh(client, body["refreshToken"]).status_code == 200

    def test_refresh_after_expiry_is_401(self, client, clock):
        original = register(client, email="old@example.com").get_json()
        clock.advance(timedelta(days=7, seconds=1))

        assert _refresh(client, original["refreshToken"]).status_code == 401

    def test_refresh_requires_token_field(self, client):
        resp = client.post(f"{API}/auth/refresh", json={})
        assert resp.status_code == 400

    @pytest.mark.parametrize("token", ["", "x" * 600])
    def test_unmatched_token_strings_are_decided_by_the_ledger(self, client, token):
        issued = register(client, email="blank@example.com").get_json()

        refreshed = _refresh(client, token)
        assert refreshed.status_code == 401
        assert problem(refreshed)["detail"] == "Invalid or expired refresh token"

        revoked = _revoke(client, token, issued["token"])
        assert revoked.status_code == 404
        assert problem(revoked)["detail"] == "Refresh token not found"

    def test_revoke_requires_access_token(self, client):
        original = register(client, email="v@example.com").get_json()

        resp = _revoke(client, original["refreshToken"], None)

        assert resp.status_code == 401
        assert _refresh(client, original["refreshToken"]).status_code == 200

    def test_revoke_then_refresh_and_second_revoke(self, client):
        original = register(client, email="v@example.com").get_json()

        resp = _revoke(client, original["refreshToken"], original["token"])
        assert resp.status_code == 200
        assert resp.get_json() == {"message": "Token revoked successfully"}

        assert _refresh(client, original["refreshToken"]).status_code == 401

        again = _revoke(client, original["refreshToken"], original["token"])
        assert again.status_code == 404
        assert problem(again)["detail"] == "Refresh token not found"

    def test_revoked_refresh_does_not_invalidate_access_token(self, client):
        original = register(client, email="v@example.com").get_json()
        _revoke(client, original["refreshToken"], original["token"])

        me = client.get(f"{API}/auth/me", headers=bearer(original["token"]))
        assert me.status_code == 200


# --------------------------------------------------------------------------- #
# /me and the token gate
# --------------------------------------------------------------------------- #


class TestMeAndGate:
    def test_me_returns_profile(self, client):
        original = register(client, email="me@example.com", full_name="Me Myself").get_json()

        resp = client.get(f"{API}/auth/me", headers=bearer(original["token"]))

        assert resp.status_code == 200
        body = resp.get_json()
        assert body["id"] == original["userId"]
        assert body["fullName"] == "Me Myself"
        assert body["isActive"] is True
        assert "passwordHash" not in body

    def test_missing_token_is_401(self, client):
        resp = client.get(f"{API}/auth/me")
        assert resp.status_code == 401
        assert problem(resp)["code"] == "unauthorized"

    def test_expired_token_is_401(self, client, session):
        user = UserFactory()
        session.commit()
        resp = client.get(f"{API}/auth/me", headers=bearer(expired_token(user)))
        assert resp.status_code == 401
        assert problem(resp)["detail"] == "Access token has expired"

    @pytest.mark.parametrize("claims", [{"aud": "other-app"}, {"iss": "someone-else"}])
    def test_foreign_audience_or_issuer_is_401(self, client, session, claims):
        user = UserFactory()
        session.commit()
        resp = client.get(f"{API}/auth/me", headers=bearer(issue_token(user, **claims)))
        assert resp.status_code == 401

    def test_tampered_token_is_401(self, client, session):
        user = UserFactory()
        session.commit()
        header, _, signature = issue_token(user).split(".")
        forged_payload = issue_token(user, role="Admin").split(".")[1]
        tampered = f"{header}.{forged_payload}.{signature}"

        resp = client.get(f"{API}/auth/me", headers=bearer(tampered))

        assert resp.status_code == 401

    def test_refresh_type_jwt_is_not_accepted_as_access(self, client, session):
        user = UserFactory()
        session.commit()
        token = create_refresh_token(identity=str(user.id))

        resp = client.get(f"{API}/auth/me", headers=bearer(token))

        assert resp.status_code == 401


class RotatedIssuerConfig(TestingConfig):
    JWT_ENCODE_ISSUER = "lms-auth-v2"
    JWT_DECODE_ISSUER = "lms-auth-v2"
    JWT_ENCODE_AUDIENCE = "lms-mobile"
    JWT_DECODE_AUDIENCE = "lms-mobile"


def test_issued_tokens_pass_the_gate_when_verification_keys_change():
    app = create_app(RotatedIssuerConfig)
    with app.app_context():
        _db.create_all()
        client = app.test_client()
        try:
            issued = register(client, email="v2@example.com").get_json()
            claims = decode_token(issued["token"])
            assert claims["iss"] == "lms-auth-v2"
            assert claims["aud"] == "lms-mobile"

            me = client.get(f"{API}/auth/me", headers=bearer(issued["token"]))
            assert me.status_code == 200
        finally:
            _db.session.remove()
            _db.drop_all()


# --------------------------------------------------------------------------- #
# Rate limiting
# --------------------------------------------------------------------------- #


class RateLimitedConfig(TestingConfig):
    RATELIMIT_ENABLED = True
    AUTH_LOGIN_RATE_LIMIT = "2 per minute"


def test_login_is_rate_limited():
    app = create_app(RateLimitedConfig)
    with app.app_context():
        _db.create_all()
        client = app.test_client()
        try:
            statuses = [login(client, email="x@example.com").status_code for _ in range(3)]
            assert statuses == [401, 401, 429]
        finally:
            _db.session.remove()
            _db.drop_all()
