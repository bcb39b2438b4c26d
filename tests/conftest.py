"""
Shared fixtures.

Profiles for each role, a SQLite-backed store per test, and a
verification service with a fixed clock.
"""

from datetime import datetime, timezone

import pytest

from achievetrack.profiles import ProfileService
from achievetrack.schemas import (
    Achievement,
    AchievementCategory,
    Profile,
    UserRole,
)
from achievetrack.store import AchievementStore
from achievetrack.verification import VerificationService

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def admin_profile():
    return Profile(
        principal="principal-admin",
        role=UserRole.ADMIN,
        name="Ada Admin",
        email="ada@uni.edu",
    )


@pytest.fixture
def second_admin_profile():
    return Profile(
        principal="principal-admin-2",
        role=UserRole.ADMIN,
        name="Grace Reviewer",
        email="grace@uni.edu",
    )


@pytest.fixture
def student_profile():
    return Profile(
        principal="principal-stu",
        role=UserRole.USER,
        student_id="STU12345",
        name="Sam Student",
        email="sam@uni.edu",
    )


@pytest.fixture
def guest_profile():
    return Profile(
        principal="principal-guest",
        role=UserRole.GUEST,
        name="Gus Guest",
        email="gus@example.com",
    )


@pytest.fixture
def make_achievement():
    """Factory for pending achievements with overridable fields."""
    def _make(**overrides) -> Achievement:
        fields = {
            "achievement_id": "STU12345-1",
            "student_id": "STU12345",
            "student_principal": "principal-stu",
            "title": "Line-following robot",
            "description": "Built a robotics platform for the lab",
            "category": AchievementCategory.PROJECT,
            "date": datetime(2024, 5, 10, 9, 0),
        }
        fields.update(overrides)
        return Achievement(**fields)
    return _make


@pytest.fixture
def store(tmp_path):
    s = AchievementStore.from_url(f"sqlite:///{tmp_path / 'test.db'}")
    s.init_db()
    return s


@pytest.fixture
def service(store):
    return VerificationService(store, clock=lambda: FIXED_NOW)


@pytest.fixture
def profile_service(store):
    return ProfileService(store)
