# lms_auth/services/auth/service.py
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy.exc import IntegrityError

from lms_auth.core.security import generate_opaque_secret, hash_password, verify_password
from lms_auth.models.refresh_token import RefreshToken
from lms_auth.models.user import SELF_ASSIGNABLE_ROLES, Role, User
from lms_auth.services._shared.base import BaseService, ServiceContext
from lms_auth.services._shared.errors import violates
from lms_auth.services._shared.ports.clock import Clock, SystemClock
from lms_auth.services._shared.ports.token_provider import TokenProvider
from lms_auth.services.auth.dto import (
    AuthSessionOut,
    AuthTokenConfig,
    LoginIn,
    RefreshIn,
    RegisterIn,
    RevokeIn,
)
from lms_auth.services.auth.result import AuthErrorKind, AuthResult, RotationResult
from lms_auth.uow.base import UnitOfWork

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
INVALID_REFRESH = "Invalid or expired refresh token"

# Verified against on unknown emails so every login pays the same hashing cost.
_DUMMY_DIGEST = hash_password(secrets.token_urlsafe())


@dataclass(frozen=True, slots=True)
class _Principal:
    """Snapshot of the user fields that go into the access token."""

    user_id: int
    full_name: str
    email: str
    role: str


class AuthService(BaseService):
    """
    Authentication lifecycle: register, login, refresh, revoke.

    Each successful register/login/refresh persists one new Active refresh
    token in the same transaction as the user changes it depends on, then
    signs an access token through the injected :class:`TokenProvider`.
    Expected failures come back as :class:`AuthResult` values.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        token_cfg: AuthTokenConfig | None = None,
        clock: Clock | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        :param token_provider: Adapter for signing access tokens.
        :param token_cfg: Issuer, audience and lifetimes.
        :param clock: Time source for refresh expiry.
        :param ctx: Optional request context.
        """
        super().__init__(ctx=ctx)
        self.tokens = token_provider
        self.cfg = token_cfg or AuthTokenConfig()
        self.clock = clock or SystemClock()

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> AuthResult[AuthSessionOut]:
        """
        Create an account with a self-assignable role and start a session.

        :returns: Session on success; ``VALIDATION`` for a disallowed role or
            malformed field, ``CONFLICT`` when the email is taken.
        """
        role = Role.parse(dto.role)
        if role is None or role not in SELF_ASSIGNABLE_ROLES:
            logger.warning("auth.register rejected: role", extra={"event": "auth.register"})
            return AuthResult.failure(
                AuthErrorKind.VALIDATION,
                "Role must be one of: " + ", ".join(sorted(r.value for r in SELF_ASSIGNABLE_ROLES)),
            )

        now = self.clock.now()
        try:
            with self.rw_uow() as uow:
                if uow.users.exists_by_email(dto.email):
                    return self._email_conflict()

                user = User(full_name=dto.full_name, email=dto.email, role=role.value)
                user.password = dto.password
                user.is_active = True
                user.created_at = now
                uow.users.add(user)

                principal = self._principal(user)
                refresh_token = self._persist_refresh(uow, principal.user_id, now)
        except IntegrityError as exc:
            # Concurrent insert of the same email between check and flush.
            if violates(exc, "uq_users_email"):
                return self._email_conflict()
            raise
        except ValueError as exc:
            return AuthResult.failure(AuthErrorKind.VALIDATION, str(exc))

        logger.info(
            "auth.register", extra={"event": "auth.register", "user_id": principal.user_id}
        )
        return AuthResult.success(self._issue(principal, refresh_token))

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> AuthResult[AuthSessionOut]:
        """
        Verify credentials and start a new session.

        Unknown email, wrong password and deactivated account are
        indistinguishable to the caller.
        """
        now = self.clock.now()
        with self.rw_uow() as uow:
            user = uow.users.get_by_email(dto.email)
            if user is None:
                verify_password(dto.password, _DUMMY_DIGEST)
            if user is None or not user.verify_password(dto.password) or not user.is_active:
                logger.warning("auth.login rejected", extra={"event": "auth.login"})
                return AuthResult.failure(AuthErrorKind.UNAUTHORIZED, INVALID_CREDENTIALS)

            principal = self._principal(user)
            refresh_token = self._persist_refresh(uow, principal.user_id, now)

        logger.info("auth.login", extra={"event": "auth.login", "user_id": principal.user_id})
        return AuthResult.success(self._issue(principal, refresh_token))

    # ------------------------------------------------------------------ #
    # Refresh with rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> AuthResult[AuthSessionOut]:
        """
        Exchange an Active refresh token for a new access/refresh pair.

        The presented row is revoked with a conditional update before the
        replacement is inserted; a caller that loses a concurrent race sees
        zero affected rows and gets ``UNAUTHORIZED``.
        """
        now = self.clock.now()
        with self.rw_uow() as uow:
            row = uow.refresh_tokens.get_active(dto.refresh_token)
            user = uow.users.get(row.user_id) if row is not None else None
            outcome = self._check_rotation(row, user, now)
            if outcome is not RotationResult.OK:
                logger.warning(
                    "auth.refresh rejected: %s",
                    outcome.value,
                    extra={"event": "auth.refresh"},
                )
                return AuthResult.failure(AuthErrorKind.UNAUTHORIZED, INVALID_REFRESH)

            if not uow.refresh_tokens.revoke_if_active(row.id):  # type: ignore[union-attr]
                logger.warning(
                    "auth.refresh rejected: lost rotation race", extra={"event": "auth.refresh"}
                )
                return AuthResult.failure(AuthErrorKind.UNAUTHORIZED, INVALID_REFRESH)

            principal = self._principal(user)  # type: ignore[arg-type]
            refresh_token = self._persist_refresh(uow, principal.user_id, now)

        logger.info("auth.refresh", extra={"event": "auth.refresh", "user_id": principal.user_id})
        return AuthResult.success(self._issue(principal, refresh_token))

    # ------------------------------------------------------------------ #
    # Revoke
    # ------------------------------------------------------------------ #

    def revoke(self, dto: RevokeIn) -> AuthResult[None]:
        """
        Revoke a refresh token that is not yet revoked.

        Revoking an unknown or already revoked token yields ``NOT_FOUND``.
        Expired-but-unrevoked rows can still be revoked.
        """
        with self.rw_uow() as uow:
            row = uow.refresh_tokens.get_active(dto.refresh_token)
            if row is None or not uow.refresh_tokens.revoke_if_active(row.id):
                logger.warning("auth.revoke rejected", extra={"event": "auth.revoke"})
                return AuthResult.failure(AuthErrorKind.NOT_FOUND, "Refresh token not found")
            user_id = row.user_id

        logger.info("auth.revoke", extra={"event": "auth.revoke", "user_id": user_id})
        return AuthResult.success(None)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _check_rotation(
        row: RefreshToken | None, user: User | None, now: datetime
    ) -> RotationResult:
        if row is None:
            return RotationResult.NOT_FOUND
        if row.is_expired(now):
            return RotationResult.EXPIRED
        if user is None or not user.is_active:
            return RotationResult.USER_INACTIVE
        return RotationResult.OK

    def _persist_refresh(self, uow: UnitOfWork, user_id: int, now: datetime) -> str:
        """Insert a fresh Active ledger row and return its token string."""
        row = RefreshToken(
            user_id=user_id,
            token=generate_opaque_secret(),
            expires_at=now + self.cfg.refresh_expires,
            created_at=now,
            is_revoked=False,
        )
        uow.refresh_tokens.add(row)
        return row.token

    @staticmethod
    def _principal(user: User) -> _Principal:
        return _Principal(
            user_id=user.id,
            full_name=user.full_name,
            email=user.email,
            role=user.role,
        )

    def _issue(self, principal: _Principal, refresh_token: str) -> AuthSessionOut:
        claims: dict[str, Any] = {
            "name": principal.full_name,
            "email": principal.email,
            "role": principal.role,
            "iss": self.cfg.issuer,
            "aud": self.cfg.audience,
        }
        token = self.tokens.create_access_token(
            identity=str(principal.user_id),
            additional_claims=claims,
            expires_delta=self.cfg.access_expires,
        )
        return AuthSessionOut(
            user_id=principal.user_id,
            full_name=principal.full_name,
            email=principal.email,
            role=principal.role,
            token=token,
            refresh_token=refresh_token,
            token_expiration=self.tokens.get_expires_at(token),
        )

    @staticmethod
    def _email_conflict() -> AuthResult[AuthSessionOut]:
        logger.warning("auth.register rejected: email in use", extra={"event": "auth.register"})
        return AuthResult.failure(AuthErrorKind.CONFLICT, "Email is already registered")
