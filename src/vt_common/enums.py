"""Global enums — must match DB CHECK constraints exactly.

See alembic/versions/002_create_users.py.
"""

from enum import Enum


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    DEALER = "DEALER"


class UserStatus(str, Enum):
    ACTIVE = "ACTIVE"
    BLOCKED = "BLOCKED"


# Landing route for each role after login or a wrong-area redirect
ROLE_HOME: dict[UserRole, str] = {
    UserRole.ADMIN: "/admin",
    UserRole.DEALER: "/dealer",
}
