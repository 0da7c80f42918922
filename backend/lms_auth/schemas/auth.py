"""Authentication-related Marshmallow schemas (camelCase on the wire)."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from lms_auth.models.user import SELF_ASSIGNABLE_ROLES

_SELF_ASSIGNABLE = sorted(r.value for r in SELF_ASSIGNABLE_ROLES)


class RegisterSchema(Schema):
    """Input payload for account registration."""

    class Meta:
        unknown = EXCLUDE

    full_name = fields.String(
        required=True, data_key="fullName", validate=validate.Length(min=1, max=100)
    )
    email = fields.Email(required=True, validate=validate.Length(max=255))
    password = fields.String(required=True, validate=validate.Length(min=6, max=100))
    role = fields.String(
        required=True,
        validate=validate.OneOf(_SELF_ASSIGNABLE, error="Role must be one of: {choices}."),
    )


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True, validate=validate.Length(max=255))
    password = fields.String(required=True, validate=validate.Length(min=1, max=100))


class RefreshTokenSchema(Schema):
    """Input payload carrying an opaque refresh token (refresh and revoke)."""

    class Meta:
        unknown = EXCLUDE

    refresh_token = fields.String(required=True, data_key="refreshToken")


class AuthSessionSchema(Schema):
    """Response payload for register, login and refresh."""

    user_id = fields.Integer(required=True, data_key="userId")
    full_name = fields.String(required=True, data_key="fullName")
    email = fields.String(required=True)
    role = fields.String(required=True)
    token = fields.String(required=True)
    refresh_token = fields.String(required=True, data_key="refreshToken")
    token_expiration = fields.DateTime(required=True, data_key="tokenExpiration")


class MessageSchema(Schema):
    """Plain ``{"message": ...}`` acknowledgement."""

    message = fields.String(required=True)
