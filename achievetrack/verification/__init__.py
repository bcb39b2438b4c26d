"""
Verification lifecycle: permission policy, state machine and service.
"""

from achievetrack.verification.permissions import (
    can_edit_achievement,
    can_verify,
    is_student,
    role_of,
)
from achievetrack.verification.state_machine import VerificationStateMachine
from achievetrack.verification.service import VerificationService

__all__ = [
    "can_edit_achievement",
    "can_verify",
    "is_student",
    "role_of",
    "VerificationStateMachine",
    "VerificationService",
]
