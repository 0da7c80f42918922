"""Factory Boy definition for :class:`lms_auth.models.user.User`."""

from __future__ import annotations

import factory
from lms_auth.models.user import Role, User

from tests.factories import BaseFactory, SQLAlchemySession

DEFAULT_PASSWORD = "Passw0rd!"


class UserFactory(BaseFactory):
    """
    Build persisted :class:`lms_auth.models.user.User` instances.

    Notes
    -----
    - The password is set through the model setter so it is always hashed;
      pass ``password="..."`` to choose it.
    """

    class Meta:
        model = User

    id = None  # let autoincrement handle it
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    full_name = factory.Faker("name")
    role = Role.STUDENT.value
    is_active = True
    password_hash = factory.LazyFunction(lambda: "")  # set via postgen

    @factory.post_generation
    def password(obj, create, extracted, **kwargs):
        """Set password using model setter (ensures hashing)."""
        obj.password = extracted or DEFAULT_PASSWORD
        if create:
            SQLAlchemySession.get().flush()
