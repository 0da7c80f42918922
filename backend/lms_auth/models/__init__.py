from lms_auth.models.refresh_token import RefreshToken
from lms_auth.models.user import ADMIN_ROLES, SELF_ASSIGNABLE_ROLES, Role, User

__all__ = [
    "ADMIN_ROLES",
    "RefreshToken",
    "Role",
    "SELF_ASSIGNABLE_ROLES",
    "User",
]
