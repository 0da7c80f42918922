"""User administration endpoints guarded by the role gate."""

from __future__ import annotations

from flask import Blueprint, request

from lms_auth.api.deps import (
    get_user_service,
    json_response,
    require_auth,
    require_roles,
    timing,
    translated,
)
from lms_auth.models.user import Role
from lms_auth.schemas import (
    UserDeletedSchema,
    UserEmailQuerySchema,
    UserSchema,
    UserUpdateSchema,
)
from lms_auth.services.users.dto import UserUpdateIn

bp = Blueprint("users", __name__, url_prefix="/users")

user_schema = UserSchema()
user_list_schema = UserSchema(many=True)
user_update_schema = UserUpdateSchema()
email_query_schema = UserEmailQuerySchema()
deleted_schema = UserDeletedSchema()

STAFF_ROLES = (Role.ADMIN.value, Role.INSTRUCTOR.value, Role.SUPER_ADMIN.value)
ADMINS = (Role.ADMIN.value, Role.SUPER_ADMIN.value)


@bp.get("")
@require_roles(*STAFF_ROLES)
@timing
def list_users():
    """Return every user (staff only)."""

    service = get_user_service()
    sort = request.args.getlist("sort") or None
    with translated(service):
        users = service.list_users(sort=sort)
    return json_response(user_list_schema.dump(users))


@bp.get("/by-email")
@require_roles(*STAFF_ROLES)
@timing
def get_user_by_email():
    """Look up a user by email, case-insensitively."""

    query = email_query_schema.load(request.args)
    service = get_user_service()
    with translated(service):
        user = service.get_by_email(query["email"])
    return json_response(user_schema.dump(user))


@bp.get("/<int:user_id>")
@require_auth
@timing
def get_user(user_id: int):
    """Return one user (self or administrator)."""

    service = get_user_service()
    with translated(service):
        user = service.get_user(user_id)
    return json_response(user_schema.dump(user))


@bp.put("/<int:user_id>")
@require_auth
@timing
def update_user(user_id: int):
    """Update one user (self or administrator)."""

    data = user_update_schema.load(request.get_json(silent=True) or {})
    service = get_user_service()
    with translated(service):
        user = service.update_user(user_id, UserUpdateIn(**data))
    return json_response(user_schema.dump(user))


@bp.delete("/<int:user_id>")
@require_roles(*ADMINS)
@timing
def delete_user(user_id: int):
    """Delete a user and their refresh tokens (administrators only)."""

    service = get_user_service()
    with translated(service):
        service.delete_user(user_id)
    return json_response(
        deleted_schema.dump({"message": "User deleted successfully", "user_id": user_id})
    )
