from __future__ import annotations

import pytest
from lms_auth.services._shared.policies.common import is_owner, role_satisfies


@pytest.mark.parametrize(
    ("role", "required", "expected"),
    [
        ("Admin", {"Admin", "SuperAdmin"}, True),
        ("SuperAdmin", {"Admin", "SuperAdmin"}, True),
        ("SuperAdmin", {"Admin"}, False),
        ("Student", {"Admin", "Instructor"}, False),
        ("admin", {"Admin"}, False),
        (None, {"Admin"}, False),
        ("", {"Admin"}, False),
        (None, set(), True),
        ("Student", set(), True),
    ],
)
def test_role_satisfies_is_exact_membership(role, required, expected):
    assert role_satisfies(role, required) is expected


def test_is_owner_compares_as_strings():
    assert is_owner(actor_id=7, owner_id="7") is True
    assert is_owner(actor_id=7, owner_id=8) is False
    assert is_owner(actor_id=None, owner_id=7) is False
