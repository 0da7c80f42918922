"""
lms_auth.services._shared.ports
===============================

Ports (hexagonal interfaces) the auth services depend on.

Modules
-------
- :mod:`token_provider`:
    :class:`~.TokenProvider` for signing and decoding access tokens, plus the
    in-memory :class:`~.StubTokenProvider`.
- :mod:`clock`:
    :class:`~.Clock` with :class:`~.SystemClock` and :class:`~.FixedClock`.

Concrete adapters live under ``lms_auth.infra``.
"""

from __future__ import annotations

from .clock import Clock, FixedClock, SystemClock
from .token_provider import StubTokenProvider, TokenProvider

__all__ = [
    "Clock",
    "FixedClock",
    "StubTokenProvider",
    "SystemClock",
    "TokenProvider",
]
