"""
UserService
===========

Administration of the ``User`` aggregate on behalf of an authenticated actor:

- list and look up accounts;
- self-or-admin read and update;
- admin-only delete (cascades to the user's refresh tokens).

The route layer applies the coarse role gate; this service enforces the
per-record rules (ownership, who may change roles).
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError

from lms_auth.models.user import ADMIN_ROLES, Role, User
from lms_auth.repositories.user import UserRepository
from lms_auth.services._shared.base import BaseService
from lms_auth.services._shared.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationFailedError,
    violates,
)
from lms_auth.services._shared.policies.common import is_owner, role_satisfies
from lms_auth.services.users.dto import UserOut, UserUpdateIn

logger = logging.getLogger(__name__)

_ADMIN_ROLE_VALUES = {r.value for r in ADMIN_ROLES}


class UserService(BaseService):
    """Application service for account administration."""

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def list_users(self, *, sort: list[str] | None = None) -> list[UserOut]:
        """
        Return every user.

        :param sort: Sort tokens like ``["-created_at"]``; defaults to id order.
        """
        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            return [self._to_out(u) for u in repo.list(sort=sort)]

    def get_by_email(self, email: str | None) -> UserOut:
        """
        Look up a user by email, ignoring case and surrounding whitespace.

        :raises ValidationFailedError: If ``email`` is blank.
        :raises NotFoundError: If nobody has that email.
        """
        if email is None or not email.strip():
            raise ValidationFailedError("Email is required")

        with self.ro_uow() as uow:
            user = uow.users.find_by_email_insensitive(email)
            if user is None:
                raise NotFoundError("User", email.strip())
            return self._to_out(user)

    def get_user(self, user_id: int) -> UserOut:
        """
        Return one user; the actor must be that user or an administrator.

        :raises AuthorizationError: If the actor may not view the account.
        :raises NotFoundError: If the user does not exist.
        """
        self._ensure_self_or_admin(user_id, "You don't have permission to view this user")

        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return self._to_out(user)

    def whoami(self) -> UserOut:
        """Return the account of the authenticated actor."""
        if self.ctx.actor_id is None:
            raise AuthorizationError("Authentication required")

        with self.ro_uow() as uow:
            user = uow.users.get(self.ctx.actor_id)
            if user is None:
                raise NotFoundError("User", self.ctx.actor_id)
            return self._to_out(user)

    # --------------------------------------------------------------------- #
    # Update
    # --------------------------------------------------------------------- #

    def update_user(self, user_id: int, dto: UserUpdateIn) -> UserOut:
        """
        Update a user account.

        Rules
        -----
        - The actor must be the user or an administrator.
        - Changing ``role`` or ``is_active`` requires an administrator.
        - Only a SuperAdmin may grant SuperAdmin or modify another SuperAdmin.

        :raises AuthorizationError: On any rule above.
        :raises ValidationFailedError: For an unknown role or invalid field.
        :raises ConflictError: When the new email belongs to someone else.
        :raises NotFoundError: If the user does not exist.
        """
        self._ensure_self_or_admin(user_id, "You don't have permission to update this user")

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)

            updates = self._collect_updates(user, dto)

            if dto.email is not None:
                owner = repo.get_by_email(dto.email)
                if owner is not None and owner.id != user.id:
                    raise ConflictError("User", "email already in use")

            try:
                repo.assign_updates(user, updates)
                if dto.password:
                    repo.update_password(user, dto.password)
            except IntegrityError as exc:
                if violates(exc, "uq_users_email"):
                    raise ConflictError("User", "email already in use") from exc
                raise
            except ValueError as exc:
                raise ValidationFailedError(str(exc)) from exc

            logger.info(
                "User updated",
                extra={"event": "users.update", "user_id": user.id},
            )
            return self._to_out(user)

    # --------------------------------------------------------------------- #
    # Delete
    # --------------------------------------------------------------------- #

    def delete_user(self, user_id: int) -> None:
        """
        Delete a user and, through the ORM cascade, their refresh tokens.

        :raises AuthorizationError: If a non-SuperAdmin targets a SuperAdmin.
        :raises NotFoundError: If the user does not exist.
        """
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            if user.role == Role.SUPER_ADMIN.value and self.ctx.actor_role != Role.SUPER_ADMIN.value:
                raise AuthorizationError("Only a SuperAdmin may delete a SuperAdmin account")
            repo.delete(user)
            logger.info("User deleted", extra={"event": "users.delete", "user_id": user_id})

    # --------------------------------------------------------------------- #
    # Helpers
    # --------------------------------------------------------------------- #

    def _is_admin(self) -> bool:
        return role_satisfies(self.ctx.actor_role, _ADMIN_ROLE_VALUES)

    def _ensure_self_or_admin(self, user_id: int, msg: str) -> None:
        if not (is_owner(actor_id=self.ctx.actor_id, owner_id=user_id) or self._is_admin()):
            raise AuthorizationError(msg)

    def _collect_updates(self, user: User, dto: UserUpdateIn) -> dict[str, Any]:
        updates: dict[str, Any] = {}
        if dto.full_name is not None:
            updates["full_name"] = dto.full_name
        if dto.email is not None:
            updates["email"] = dto.email

        role_change = dto.role is not None and dto.role != user.role
        active_change = dto.is_active is not None and dto.is_active != user.is_active
        if (role_change or active_change) and not self._is_admin():
            raise AuthorizationError("Only administrators can change role or active status")

        actor_is_super = self.ctx.actor_role == Role.SUPER_ADMIN.value
        if user.role == Role.SUPER_ADMIN.value and not actor_is_super and (
            not is_owner(actor_id=self.ctx.actor_id, owner_id=user.id)
        ):
            raise AuthorizationError("Only a SuperAdmin may modify a SuperAdmin account")

        if role_change:
            role = Role.parse(dto.role)
            if role is None:
                raise ValidationFailedError(f"Unknown role: {dto.role}")
            if role is Role.SUPER_ADMIN and not actor_is_super:
                raise AuthorizationError("Only a SuperAdmin may grant the SuperAdmin role")
            updates["role"] = role.value
        if active_change:
            updates["is_active"] = bool(dto.is_active)
        return updates

    @staticmethod
    def _to_out(user: User) -> UserOut:
        return UserOut(
            id=user.id,
            full_name=user.full_name,
            email=user.email,
            role=user.role,
            is_active=user.is_active,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
