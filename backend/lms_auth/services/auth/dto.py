# lms_auth/services/auth/dto.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for self-registration.

    :param full_name: Display name.
    :type full_name: str
    :param email: Login email (normalized by the model).
    :type email: str
    :param password: Raw password (hashed by the model setter).
    :type password: str
    :param role: Requested role; must be self-assignable.
    :type role: str
    """

    full_name: str
    email: str
    password: str
    role: str


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Opaque refresh-token string.
    :type refresh_token: str
    """

    refresh_token: str


@dataclass(frozen=True, slots=True)
class RevokeIn:
    """
    Input DTO for refresh-token revocation.

    :param refresh_token: Opaque refresh-token string.
    :type refresh_token: str
    """

    refresh_token: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthSessionOut:
    """
    Result of a successful register, login or refresh.

    :param user_id: Authenticated user id.
    :param full_name: Display name.
    :param email: Normalized email.
    :param role: Role value.
    :param token: Signed access token.
    :param refresh_token: Opaque refresh token (newly persisted, Active).
    :param token_expiration: Access-token expiry instant (UTC).
    """

    user_id: int
    full_name: str
    email: str
    role: str
    token: str
    refresh_token: str
    token_expiration: datetime


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token emission configuration.

    :param issuer: ``iss`` claim value.
    :type issuer: str
    :param audience: ``aud`` claim value.
    :type audience: str
    :param access_expires: Access token lifetime.
    :type access_expires: timedelta
    :param refresh_expires: Refresh token lifetime.
    :type refresh_expires: timedelta
    """

    issuer: str = "lms-auth"
    audience: str = "lms-clients"
    access_expires: timedelta = timedelta(minutes=60)
    refresh_expires: timedelta = timedelta(days=7)

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> AuthTokenConfig:
        """
        Build from a Flask config (or any mapping) using the ``JWT_*`` keys.

        ``iss``/``aud`` come from the ``JWT_DECODE_*`` keys the gate verifies
        against, falling back to ``JWT_ISSUER``/``JWT_AUDIENCE``.
        """
        issuer = config.get("JWT_DECODE_ISSUER") or config.get("JWT_ISSUER", "lms-auth")
        audience = config.get("JWT_DECODE_AUDIENCE") or config.get("JWT_AUDIENCE", "lms-clients")
        return cls(
            issuer=str(issuer),
            audience=str(audience),
            access_expires=timedelta(minutes=int(config.get("JWT_ACCESS_TOKEN_MINUTES", 60))),
            refresh_expires=timedelta(days=int(config.get("JWT_REFRESH_TOKEN_DAYS", 7))),
        )
