"""
Verification State Machine

    pending → verified
    pending → rejected

verified and rejected are terminal. A rejected achievement is not
reopened; the student registers a new one.

Pure computation: transitions return a new snapshot and never write.
Persisting the snapshot atomically is the store's job.
"""

from datetime import datetime

from achievetrack.errors import InvalidTransitionError
from achievetrack.schemas.achievement import Achievement, VerificationEvent
from achievetrack.schemas.base import VerificationStatus


# Valid transitions: {from_state: {allowed_to_states}}
_TRANSITIONS: dict[VerificationStatus, frozenset[VerificationStatus]] = {
    VerificationStatus.PENDING: frozenset(
        {VerificationStatus.VERIFIED, VerificationStatus.REJECTED}
    ),
    # Terminal states: no outgoing transitions
    VerificationStatus.VERIFIED: frozenset(),
    VerificationStatus.REJECTED: frozenset(),
}

if set(_TRANSITIONS) != set(VerificationStatus):
    raise RuntimeError("Transition table must cover every verification status")


class VerificationStateMachine:
    """Validates and applies achievement status transitions."""

    @staticmethod
    def valid_transitions(status: VerificationStatus) -> frozenset[VerificationStatus]:
        return _TRANSITIONS[status]

    @staticmethod
    def is_terminal(status: VerificationStatus) -> bool:
        return not _TRANSITIONS[status]

    @staticmethod
    def validate_transition(achievement: Achievement, target: VerificationStatus) -> None:
        """Raise InvalidTransitionError unless `target` is reachable from the current status."""
        current = achievement.status
        if target not in _TRANSITIONS[current]:
            raise InvalidTransitionError(
                achievement_id=achievement.achievement_id,
                current=current.value,
                target=VerificationStatus(target).value,
            )

    @staticmethod
    def apply_transition(
        achievement: Achievement,
        target: VerificationStatus,
        verifier: str,
        notes: str | None,
        timestamp: datetime,
    ) -> Achievement:
        """
        Validate and apply a transition.

        Returns the new snapshot with one appended event. Blank notes
        are recorded as no notes.
        """
        VerificationStateMachine.validate_transition(achievement, target)
        cleaned_notes = notes.strip() if notes else None
        event = VerificationEvent(
            status=target,
            verifier=verifier,
            notes=cleaned_notes or None,
            timestamp=timestamp,
        )
        return achievement.with_event(event)
