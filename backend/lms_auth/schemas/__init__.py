"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    AuthSessionSchema,
    LoginSchema,
    MessageSchema,
    RefreshTokenSchema,
    RegisterSchema,
)
from .user import UserDeletedSchema, UserEmailQuerySchema, UserSchema, UserUpdateSchema

__all__ = [
    "AuthSessionSchema",
    "LoginSchema",
    "MessageSchema",
    "RefreshTokenSchema",
    "RegisterSchema",
    "UserDeletedSchema",
    "UserEmailQuerySchema",
    "UserSchema",
    "UserUpdateSchema",
]
