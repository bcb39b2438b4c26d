"""
Store tests against a temporary SQLite database.
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from achievetrack.errors import (
    AchievementNotFoundError,
    DuplicateAchievementError,
    ProfileNotFoundError,
)
from achievetrack.schemas import (
    AchievementCategory,
    UserRole,
    VerificationEvent,
    VerificationStatus,
)
from achievetrack.store.models import VerificationEventRow

REVIEWED_AT = datetime(2026, 3, 1, 12, 0)


def _event(status, notes=None):
    return VerificationEvent(
        status=status, verifier="principal-admin", notes=notes, timestamp=REVIEWED_AT
    )


def _event_count(store, achievement_id):
    with store.SessionLocal() as session:
        return session.scalar(
            select(func.count())
            .select_from(VerificationEventRow)
            .where(VerificationEventRow.achievement_id == achievement_id)
        )


@pytest.fixture
def seeded(store, make_achievement):
    """Three achievements across two students, one already verified."""
    items = [
        make_achievement(
            achievement_id="STU12345-1",
            title="Line-following robot",
            description="Robotics platform for the lab",
            category=AchievementCategory.PROJECT,
            date=datetime(2024, 5, 10),
        ),
        make_achievement(
            achievement_id="STU12345-2",
            title="AWS Cloud Practitioner",
            description="Certification exam passed with 90%",
            category=AchievementCategory.CERTIFICATE,
            date=datetime(2023, 2, 1),
            status=VerificationStatus.VERIFIED,
            verification_history=[_event(VerificationStatus.VERIFIED, "Checked")],
        ),
        make_achievement(
            achievement_id="STU99999-1",
            student_id="STU99999",
            student_principal="principal-other",
            title="Campus Hackathon",
            description="Built a robotics dashboard in 24 hours",
            category=AchievementCategory.HACKATHON,
            date=datetime(2024, 11, 3),
        ),
    ]
    for item in items:
        store.insert_achievement(item)
    return items


class TestAchievementRecords:

    def test_round_trip(self, store, make_achievement) -> None:
        original = make_achievement(links=["https://github.com/sam/robot"], certificate_image="blob://42")
        store.insert_achievement(original)

        loaded = store.get_achievement(original.achievement_id)
        assert loaded == original

    def test_history_round_trip(self, store, seeded) -> None:
        loaded = store.get_achievement("STU12345-2")
        assert loaded.status == VerificationStatus.VERIFIED
        assert [e.notes for e in loaded.verification_history] == ["Checked"]

    def test_duplicate_id_refused(self, store, make_achievement) -> None:
        store.insert_achievement(make_achievement())
        with pytest.raises(DuplicateAchievementError) as exc_info:
            store.insert_achievement(make_achievement(title="Another title"))
        assert exc_info.value.achievement_id == "STU12345-1"
        assert store.get_achievement("STU12345-1").title == "Line-following robot"

    def test_aware_dates_keep_their_offset(self, store, make_achievement) -> None:
        eastern = timezone(timedelta(hours=-5))
        original = make_achievement(date=datetime(2024, 12, 31, 23, 0, tzinfo=eastern))
        store.insert_achievement(original)

        loaded = store.get_achievement(original.achievement_id)
        assert loaded.date == original.date
        assert loaded.date.utcoffset() == timedelta(hours=-5)
        assert loaded.date.year == 2024

    def test_naive_dates_stay_naive(self, store, make_achievement) -> None:
        store.insert_achievement(make_achievement())
        assert store.get_achievement("STU12345-1").date.tzinfo is None

    def test_event_timestamp_keeps_utc(self, store, make_achievement) -> None:
        reviewed = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
        event = VerificationEvent(
            status=VerificationStatus.VERIFIED, verifier="principal-admin", timestamp=reviewed
        )
        store.insert_achievement(make_achievement().with_event(event))

        loaded = store.get_achievement("STU12345-1")
        assert loaded.verification_history[0].timestamp == reviewed
        assert loaded.verification_history[0].timestamp.tzinfo is not None

    def test_missing_achievement(self, store) -> None:
        with pytest.raises(AchievementNotFoundError):
            store.get_achievement("nope")


class TestLookupPrimitives:

    def test_by_student_id_returns_every_status(self, store, seeded) -> None:
        result = store.get_achievements_by_student_id("STU12345")
        # ordered by date
        assert [a.achievement_id for a in result] == ["STU12345-2", "STU12345-1"]

    def test_verified_by_category_excludes_pending(self, store, seeded) -> None:
        assert store.get_verified_achievements_by_category(AchievementCategory.HACKATHON) == []
        certs = store.get_verified_achievements_by_category(AchievementCategory.CERTIFICATE)
        assert [a.achievement_id for a in certs] == ["STU12345-2"]

    def test_search_is_case_insensitive_on_title_and_description(self, store, seeded) -> None:
        result = store.search_achievements("ROBOTICS")
        assert {a.achievement_id for a in result} == {"STU12345-1", "STU99999-1"}
        assert [a.achievement_id for a in store.search_achievements("hackathon")] == ["STU99999-1"]

    def test_search_folds_non_ascii_case(self, store, make_achievement) -> None:
        store.insert_achievement(
            make_achievement(achievement_id="uber", title="Über robot", description="Ärztekammer award ceremony")
        )

        assert [a.achievement_id for a in store.search_achievements("über")] == ["uber"]
        assert [a.achievement_id for a in store.search_achievements("ÜBER")] == ["uber"]
        assert [a.achievement_id for a in store.search_achievements("ärztekammer")] == ["uber"]

    def test_search_treats_wildcards_literally(self, store, seeded) -> None:
        assert [a.achievement_id for a in store.search_achievements("90%")] == ["STU12345-2"]
        assert store.search_achievements("9_%") == []

    def test_blank_search_returns_nothing(self, store, seeded) -> None:
        assert store.search_achievements("  ") == []

    def test_pending_queue(self, store, seeded) -> None:
        pending = store.get_pending_achievements()
        assert {a.achievement_id for a in pending} == {"STU12345-1", "STU99999-1"}


class TestCompareAndSet:

    def test_applies_status_and_event_together(self, store, seeded) -> None:
        current = store.get_achievement("STU12345-1")
        updated = current.with_event(_event(VerificationStatus.VERIFIED, "Looks good"))

        assert store.compare_and_set_status("STU12345-1", VerificationStatus.PENDING, updated)

        loaded = store.get_achievement("STU12345-1")
        assert loaded.status == VerificationStatus.VERIFIED
        assert [e.notes for e in loaded.verification_history] == ["Looks good"]

    def test_stale_expectation_writes_nothing(self, store, seeded) -> None:
        stale = store.get_achievement("STU12345-1")
        first = stale.with_event(_event(VerificationStatus.VERIFIED))
        second = stale.with_event(_event(VerificationStatus.REJECTED, "Duplicate"))

        assert store.compare_and_set_status("STU12345-1", VerificationStatus.PENDING, first)
        assert not store.compare_and_set_status("STU12345-1", VerificationStatus.PENDING, second)

        loaded = store.get_achievement("STU12345-1")
        assert loaded.status == VerificationStatus.VERIFIED
        assert _event_count(store, "STU12345-1") == 1

    def test_unknown_id_returns_false(self, store, make_achievement) -> None:
        ghost = make_achievement(achievement_id="ghost").with_event(_event(VerificationStatus.VERIFIED))
        assert not store.compare_and_set_status("ghost", VerificationStatus.PENDING, ghost)

    def test_snapshot_must_match_id(self, store, seeded) -> None:
        updated = store.get_achievement("STU12345-1").with_event(_event(VerificationStatus.VERIFIED))
        with pytest.raises(ValueError):
            store.compare_and_set_status("STU99999-1", VerificationStatus.PENDING, updated)


class TestProfiles:

    def test_insert_and_get(self, store, student_profile) -> None:
        store.insert_profile(student_profile)
        assert store.get_profile("principal-stu") == student_profile

    def test_unknown_profile_is_none(self, store) -> None:
        assert store.get_profile("nobody") is None

    def test_list_sorted_by_principal(self, store, student_profile, admin_profile) -> None:
        store.insert_profile(student_profile)
        store.insert_profile(admin_profile)
        assert [p.principal for p in store.list_profiles()] == ["principal-admin", "principal-stu"]

    def test_update_changes_editable_fields_only(self, store, student_profile) -> None:
        store.insert_profile(student_profile)
        changed = student_profile.model_copy(
            update={"name": "Samuel Student", "bio": "Robotics", "role": UserRole.ADMIN}
        )
        store.update_profile(changed)

        loaded = store.get_profile("principal-stu")
        assert loaded.name == "Samuel Student"
        assert loaded.bio == "Robotics"
        assert loaded.role == UserRole.USER

    def test_update_missing_profile(self, store, student_profile) -> None:
        with pytest.raises(ProfileNotFoundError):
            store.update_profile(student_profile)
