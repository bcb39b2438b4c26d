"""
Permission Policy

Pure predicates deciding what a profile may do. The verification
service and any listing UI consult these and nothing else.

A missing profile (principal that never completed setup) is a guest.
"""

from achievetrack.schemas.base import UserRole
from achievetrack.schemas.profile import Profile


def role_of(profile: Profile | None) -> UserRole:
    return profile.role if profile is not None else UserRole.GUEST


def can_verify(profile: Profile | None) -> bool:
    """Only admins may move an achievement out of pending."""
    role = role_of(profile)
    if role == UserRole.ADMIN:
        return True
    if role in (UserRole.USER, UserRole.GUEST):
        return False
    raise ValueError(f"Unhandled role: {role}")


def is_student(profile: Profile | None) -> bool:
    return role_of(profile) == UserRole.USER


def can_edit_achievement(profile: Profile | None, owner_identifier: str) -> bool:
    """
    Admins may edit any achievement; students only their own.

    `owner_identifier` is the owning principal of the achievement.
    """
    role = role_of(profile)
    if role == UserRole.ADMIN:
        return True
    if role == UserRole.USER:
        return profile.principal == owner_identifier
    if role == UserRole.GUEST:
        return False
    raise ValueError(f"Unhandled role: {role}")
