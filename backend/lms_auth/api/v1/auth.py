"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from lms_auth.api.deps import (
    get_auth_service,
    get_user_service,
    json_response,
    require_auth,
    timing,
    translated,
    unwrap,
)
from lms_auth.core.extensions import limiter
from lms_auth.schemas import (
    AuthSessionSchema,
    LoginSchema,
    MessageSchema,
    RefreshTokenSchema,
    RegisterSchema,
    UserSchema,
)
from lms_auth.services.auth.dto import LoginIn, RefreshIn, RegisterIn, RevokeIn

bp = Blueprint("auth", __name__, url_prefix="/auth")

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshTokenSchema()
session_schema = AuthSessionSchema()
message_schema = MessageSchema()
user_schema = UserSchema()


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "10 per minute"))


@bp.post("/register")
@timing
def register():
    """Create an account and return its first token pair."""

    data = register_schema.load(request.get_json(silent=True) or {})
    service = get_auth_service()
    session = unwrap(service.register(RegisterIn(**data)))
    return json_response(session_schema.dump(session))


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Authenticate credentials and issue a token pair."""

    data = login_schema.load(request.get_json(silent=True) or {})
    service = get_auth_service()
    session = unwrap(service.login(LoginIn(**data)))
    return json_response(session_schema.dump(session))


@bp.post("/refresh")
@timing
def refresh():
    """Rotate a refresh token into a new token pair."""

    data = refresh_schema.load(request.get_json(silent=True) or {})
    service = get_auth_service()
    session = unwrap(service.refresh(RefreshIn(**data)))
    return json_response(session_schema.dump(session))


@bp.post("/revoke")
@require_auth
@timing
def revoke():
    """Revoke a refresh token."""

    data = refresh_schema.load(request.get_json(silent=True) or {})
    service = get_auth_service()
    unwrap(service.revoke(RevokeIn(**data)))
    return json_response(message_schema.dump({"message": "Token revoked successfully"}))


@bp.get("/me")
@require_auth
@timing
def me():
    """Return the authenticated user profile."""

    service = get_user_service()
    with translated(service):
        user = service.whoami()
    return json_response(user_schema.dump(user))
