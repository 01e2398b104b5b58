"""Tests for vt_common.enums — all enum values must match DB CHECK constraints."""

from src.vt_common.enums import ROLE_HOME, UserRole, UserStatus


class TestAllEnumsAreStr:
    """All enums inherit from (str, Enum) for JSON serialization."""

    def test_user_role_is_str(self) -> None:
        assert isinstance(UserRole.ADMIN, str)
        assert UserRole.ADMIN == "ADMIN"

    def test_user_status_is_str(self) -> None:
        assert isinstance(UserStatus.BLOCKED, str)
        assert UserStatus.BLOCKED == "BLOCKED"


class TestUserRole:
    def test_all_values(self) -> None:
        assert {r.value for r in UserRole} == {"ADMIN", "DEALER"}


class TestUserStatus:
    def test_all_values(self) -> None:
        assert {s.value for s in UserStatus} == {"ACTIVE", "BLOCKED"}


class TestRoleHome:
    def test_every_role_has_a_home(self) -> None:
        assert set(ROLE_HOME) == set(UserRole)

    def test_homes(self) -> None:
        assert ROLE_HOME[UserRole.ADMIN] == "/admin"
        assert ROLE_HOME[UserRole.DEALER] == "/dealer"
