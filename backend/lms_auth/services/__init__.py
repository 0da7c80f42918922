"""Service layer public API.

Callers import from :mod:`lms_auth.services` without knowing the internal
layout.

Re-exports
----------
- Base primitives: :class:`BaseService`, :class:`ServiceContext`
- Auth orchestrator: :class:`AuthService`, its DTOs and :class:`AuthResult`
- User administration: :class:`UserService`, :class:`UserUpdateIn`, :class:`UserOut`
"""

from __future__ import annotations

from ._shared.base import BaseService, ServiceContext
from .auth.dto import (
    AuthSessionOut,
    AuthTokenConfig,
    LoginIn,
    RefreshIn,
    RegisterIn,
    RevokeIn,
)
from .auth.result import AuthErrorKind, AuthResult, RotationResult
from .auth.service import AuthService
from .users.dto import UserOut, UserUpdateIn
from .users.service import UserService

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    # Auth
    "AuthService",
    "AuthSessionOut",
    "AuthTokenConfig",
    "AuthErrorKind",
    "AuthResult",
    "LoginIn",
    "RefreshIn",
    "RegisterIn",
    "RevokeIn",
    "RotationResult",
    # Users
    "UserService",
    "UserOut",
    "UserUpdateIn",
]
