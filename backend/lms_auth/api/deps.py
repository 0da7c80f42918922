"""Shared API helpers: the authorization gate, service wiring and responses."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request
from flask_jwt_extended import get_jwt, verify_jwt_in_request

from lms_auth.core.errors import APIError, BadRequest, Conflict, Forbidden, NotFound, Unauthorized
from lms_auth.core.logger import ensure_request_id
from lms_auth.infra.jwt.jwt_token_provider import JWTTokenProvider
from lms_auth.services._shared.base import BaseService, ServiceContext
from lms_auth.services._shared.errors import ServiceError
from lms_auth.services._shared.policies.common import role_satisfies
from lms_auth.services.auth.dto import AuthTokenConfig
from lms_auth.services.auth.result import AuthErrorKind, AuthResult
from lms_auth.services.auth.service import AuthService
from lms_auth.services.users.service import UserService

F = TypeVar("F", bound=Callable[..., Any])

_RESULT_ERRORS: dict[AuthErrorKind, type[APIError]] = {
    AuthErrorKind.CONFLICT: Conflict,
    AuthErrorKind.UNAUTHORIZED: Unauthorized,
    AuthErrorKind.NOT_FOUND: NotFound,
    AuthErrorKind.VALIDATION: BadRequest,
}


# ------------------------------ Authorization gate ------------------------------


def require_auth(func: F) -> F:
    """Ensure the request carries a valid access token (signature, iss, aud, exp, type)."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        verify_jwt_in_request(optional=False)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_roles(*roles: str) -> Callable[[F], F]:
    """Ensure the verified token's ``role`` claim is one of ``roles``.

    Authentication failures are 401; a valid token with another role is 403.
    """
    allowed = frozenset(str(r) for r in roles)

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            verify_jwt_in_request(optional=False)
            claims = get_jwt() or {}
            if not role_satisfies(claims.get("role"), allowed):
                raise Forbidden("Insufficient role")
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def current_context() -> ServiceContext:
    """Build a :class:`ServiceContext` from the verified token claims."""

    claims = get_jwt() or {}
    sub = claims.get("sub")
    actor_id = int(sub) if isinstance(sub, str) and sub.isdigit() else None
    return ServiceContext(
        actor_id=actor_id,
        actor_role=claims.get("role"),
        request_id=ensure_request_id(),
    )


# ------------------------------ Service wiring ------------------------------


def get_auth_service() -> AuthService:
    """Construct the auth orchestrator with the app's token config and clock."""

    return AuthService(
        token_provider=JWTTokenProvider(),
        token_cfg=AuthTokenConfig.from_mapping(current_app.config),
        clock=current_app.extensions["clock"],
        ctx=ServiceContext(request_id=ensure_request_id()),
    )


def get_user_service() -> UserService:
    return UserService(ctx=current_context())


def unwrap(result: AuthResult[Any]) -> Any:
    """Return ``result.value`` or raise the matching :class:`APIError`."""

    if result.error is None:
        return result.value
    raise _RESULT_ERRORS[result.error](result.message)


@contextmanager
def translated(service: BaseService) -> Iterator[None]:
    """Re-raise :class:`ServiceError` from ``service`` as its API error."""

    try:
        yield
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc


# ------------------------------ Responses ------------------------------


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
