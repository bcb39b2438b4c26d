"""
Unit tests for the permission policy predicates.
"""

import pytest

from achievetrack.schemas import UserRole
from achievetrack.verification.permissions import (
    can_edit_achievement,
    can_verify,
    is_student,
    role_of,
)


class TestCanVerify:

    def test_admin_can_verify(self, admin_profile) -> None:
        assert can_verify(admin_profile) is True

    def test_student_cannot_verify(self, student_profile) -> None:
        assert can_verify(student_profile) is False

    def test_guest_cannot_verify(self, guest_profile) -> None:
        assert can_verify(guest_profile) is False

    def test_missing_profile_cannot_verify(self) -> None:
        assert can_verify(None) is False


class TestIsStudent:

    def test_user_role_is_student(self, student_profile) -> None:
        assert is_student(student_profile) is True

    @pytest.mark.parametrize("fixture_name", ["admin_profile", "guest_profile"])
    def test_other_roles_are_not(self, fixture_name, request) -> None:
        assert is_student(request.getfixturevalue(fixture_name)) is False

    def test_missing_profile_is_guest(self) -> None:
        assert role_of(None) == UserRole.GUEST
        assert is_student(None) is False


class TestCanEditAchievement:

    def test_owner_student_can_edit(self, student_profile) -> None:
        assert can_edit_achievement(student_profile, "principal-stu") is True

    def test_other_student_cannot_edit(self, student_profile) -> None:
        assert can_edit_achievement(student_profile, "principal-other") is False

    def test_admin_can_edit_anything(self, admin_profile) -> None:
        assert can_edit_achievement(admin_profile, "principal-stu") is True
        assert can_edit_achievement(admin_profile, "principal-other") is True

    def test_guest_never_edits_even_own_identifier(self, guest_profile) -> None:
        assert can_edit_achievement(guest_profile, guest_profile.principal) is False

    def test_missing_profile_cannot_edit(self) -> None:
        assert can_edit_achievement(None, "principal-stu") is False
