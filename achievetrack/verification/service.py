"""
Verification Service

Creation and review of achievements on behalf of a calling profile.

Every transition is: permission check → state machine → compare-and-swap
write keyed on the status the transition was computed from. When two
reviewers race on the same pending achievement, the store accepts one
write and the other caller gets InvalidTransitionError; the history
gains exactly one event.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Protocol

from achievetrack.errors import (
    InvalidTransitionError,
    StudentIdMismatchError,
    UnauthorizedError,
)
from achievetrack.schemas.achievement import Achievement, AchievementInput
from achievetrack.schemas.base import VerificationStatus
from achievetrack.schemas.profile import Profile
from achievetrack.utils.validation import validate_schema
from achievetrack.verification.permissions import can_edit_achievement, can_verify, is_student
from achievetrack.verification.state_machine import VerificationStateMachine

logger = logging.getLogger(__name__)

REVIEW_OUTCOMES = frozenset({VerificationStatus.VERIFIED, VerificationStatus.REJECTED})


class VerificationStore(Protocol):
    """Store operations the service relies on."""

    def get_achievement(self, achievement_id: str) -> Achievement: ...

    def insert_achievement(self, achievement: Achievement) -> None: ...

    def compare_and_set_status(
        self,
        achievement_id: str,
        expected: VerificationStatus,
        updated: Achievement,
    ) -> bool: ...

    def get_pending_achievements(self) -> list[Achievement]: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def derive_achievement_id(student_id: str, created_at: datetime) -> str:
    """Default id: student id plus creation time in epoch milliseconds."""
    return f"{student_id}-{int(created_at.timestamp() * 1000)}"


class VerificationService:
    """Achievement lifecycle operations exposed to the UI layer."""

    def __init__(
        self,
        store: VerificationStore,
        clock: Callable[[], datetime] | None = None,
        state_machine: VerificationStateMachine | None = None,
    ):
        self.store = store
        self.clock = clock or _utcnow
        self.state_machine = state_machine or VerificationStateMachine()

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    def create_achievement(
        self, caller: Profile | None, payload: AchievementInput | dict[str, Any]
    ) -> Achievement:
        """
        Register a pending achievement for the calling student.

        The caller must hold the student role and the payload's student id
        must be the one on the caller's own profile.
        """
        principal = caller.principal if caller else None
        if not is_student(caller):
            logger.warning(f"Refused achievement creation by non-student {principal}")
            raise UnauthorizedError(
                action="create achievement", required="student role", principal=principal
            )

        data = validate_schema(AchievementInput, payload)
        if caller.student_id != data.student_id:
            logger.warning(
                f"Student id mismatch for {principal}: profile {caller.student_id}, "
                f"payload {data.student_id}"
            )
            raise StudentIdMismatchError(
                expected=caller.student_id, actual=data.student_id, principal=principal
            )
        if data.student_principal and data.student_principal != caller.principal:
            raise UnauthorizedError(
                action="create achievement",
                required="ownership by the calling principal",
                principal=principal,
            )

        achievement = Achievement(
            achievement_id=data.achievement_id
            or derive_achievement_id(data.student_id, self.clock()),
            student_id=data.student_id,
            student_principal=caller.principal,
            title=data.title,
            description=data.description,
            category=data.category,
            date=data.date,
            links=data.links,
            certificate_image=data.certificate_image,
        )
        self.store.insert_achievement(achievement)
        logger.info(
            f"Achievement {achievement.achievement_id} created for {achievement.student_id}"
        )
        return achievement

    # -------------------------------------------------------------------------
    # Review
    # -------------------------------------------------------------------------

    def verify_achievement(
        self,
        caller: Profile | None,
        achievement_id: str,
        status: VerificationStatus | str,
        notes: str | None = None,
    ) -> Achievement:
        """
        Move a pending achievement to `status` (verified or rejected).

        Raises:
            UnauthorizedError: caller is not a verifier; nothing is read or written
            AchievementNotFoundError: no such achievement
            InvalidTransitionError: status is not a review outcome, the
                achievement is already reviewed, or a concurrent review won
        """
        principal = caller.principal if caller else None
        if not can_verify(caller):
            logger.warning(f"Refused review of {achievement_id} by {principal}")
            raise UnauthorizedError(
                action="verify achievement", required="admin role", principal=principal
            )

        current = self.store.get_achievement(achievement_id)
        if status not in REVIEW_OUTCOMES:
            raise InvalidTransitionError(
                achievement_id=achievement_id,
                current=current.status.value,
                target=str(getattr(status, "value", status)),
            )
        target = VerificationStatus(status)

        updated = self.state_machine.apply_transition(
            current,
            target,
            verifier=caller.principal,
            notes=notes,
            timestamp=self.clock(),
        )
        if not self.store.compare_and_set_status(achievement_id, current.status, updated):
            winner = self.store.get_achievement(achievement_id)
            logger.warning(
                f"Lost review race on {achievement_id}: now {winner.status.value}"
            )
            raise InvalidTransitionError(
                achievement_id=achievement_id,
                current=winner.status.value,
                target=target.value,
            )

        logger.info(f"Achievement {achievement_id} {target.value} by {caller.principal}")
        return updated

    def verify(self, caller: Profile | None, achievement_id: str, notes: str | None = None) -> Achievement:
        return self.verify_achievement(caller, achievement_id, VerificationStatus.VERIFIED, notes)

    def reject(self, caller: Profile | None, achievement_id: str, notes: str | None = None) -> Achievement:
        return self.verify_achievement(caller, achievement_id, VerificationStatus.REJECTED, notes)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_achievement(self, achievement_id: str) -> Achievement:
        return self.store.get_achievement(achievement_id)

    def get_achievements_for_verification(self, caller: Profile | None) -> list[Achievement]:
        """Pending queue, visible to verifiers only."""
        if not can_verify(caller):
            raise UnauthorizedError(
                action="list verification queue",
                required="admin role",
                principal=caller.principal if caller else None,
            )
        return self.store.get_pending_achievements()

    def available_actions(self, caller: Profile | None, achievement: Achievement) -> dict[str, bool]:
        """What a UI may offer this caller for this achievement."""
        reviewable = not self.state_machine.is_terminal(achievement.status)
        return {
            "can_verify": reviewable and can_verify(caller),
            "can_edit": can_edit_achievement(caller, achievement.student_principal),
        }
