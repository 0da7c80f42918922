"""Repository package exposing persistence-layer access for all models."""

from __future__ import annotations

from lms_auth.repositories.base import BaseRepository, apply_sorting, parse_sort_tokens
from lms_auth.repositories.refresh_token import RefreshTokenRepository
from lms_auth.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "apply_sorting",
    "parse_sort_tokens",
    "RefreshTokenRepository",
    "UserRepository",
]
