"""User resource schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from lms_auth.models.user import Role

_ALL_ROLES = [r.value for r in Role]


class UserSchema(Schema):
    """Public representation of a user account."""

    id = fields.Integer(required=True)
    full_name = fields.String(required=True, data_key="fullName")
    email = fields.Email(required=True)
    role = fields.String(required=True)
    is_active = fields.Boolean(required=True, data_key="isActive")
    created_at = fields.DateTime(required=True, data_key="createdAt")
    updated_at = fields.DateTime(allow_none=True, data_key="updatedAt")


class UserUpdateSchema(Schema):
    """Payload for ``PUT /users/<id>``; omitted keys are left unchanged."""

    class Meta:
        unknown = EXCLUDE

    full_name = fields.String(data_key="fullName", validate=validate.Length(min=1, max=100))
    email = fields.Email(validate=validate.Length(max=255))
    password = fields.String(
        load_default=None, allow_none=True, validate=validate.Length(min=6, max=100)
    )
    role = fields.String(validate=validate.OneOf(_ALL_ROLES))
    is_active = fields.Boolean(data_key="isActive")


class UserEmailQuerySchema(Schema):
    """Query string for ``GET /users/by-email``."""

    class Meta:
        unknown = EXCLUDE

    email = fields.String(load_default=None)


class UserDeletedSchema(Schema):
    message = fields.String(required=True)
    user_id = fields.Integer(required=True, data_key="userId")
