from __future__ import annotations

from collections.abc import Iterable


def is_owner(*, actor_id, owner_id) -> bool:
    """Return True if the actor owns the resource."""
    if actor_id is None or owner_id is None:
        return False
    return str(actor_id) == str(owner_id)


def role_satisfies(role: str | None, required: Iterable[str]) -> bool:
    """Return True when ``role`` is one of ``required``.

    Membership is exact: no hierarchy is implied, so a SuperAdmin only passes
    where it is listed. A missing role never satisfies a non-empty set; an
    empty set only requires authentication.
    """
    allowed = {str(r) for r in required}
    if not allowed:
        return True
    return role is not None and str(role) in allowed
