"""
Profile Service

Identity-bound profile reads and self-service saves. The first save for
a principal creates its profile; afterwards the owner may change only
name, email and bio.
"""

import logging
from typing import Any, Protocol

from achievetrack.errors import ImmutableFieldError, UnauthorizedError
from achievetrack.schemas.base import UserRole
from achievetrack.schemas.profile import EDITABLE_PROFILE_FIELDS, Profile
from achievetrack.utils.validation import validate_schema
from achievetrack.verification.permissions import can_verify, role_of

logger = logging.getLogger(__name__)


class ProfileStore(Protocol):
    def get_profile(self, principal: str) -> Profile | None: ...

    def list_profiles(self) -> list[Profile]: ...

    def insert_profile(self, profile: Profile) -> None: ...

    def update_profile(self, profile: Profile) -> None: ...


class ProfileService:
    def __init__(self, store: ProfileStore):
        self.store = store

    def get_caller_user_profile(self, principal: str) -> Profile | None:
        return self.store.get_profile(principal)

    def get_user_profile(self, principal: str) -> Profile | None:
        return self.store.get_profile(principal)

    def get_caller_user_role(self, principal: str) -> UserRole:
        return role_of(self.store.get_profile(principal))

    def is_caller_admin(self, principal: str) -> bool:
        return self.get_caller_user_role(principal) == UserRole.ADMIN

    def get_all_profiles(self, caller: Profile | None) -> list[Profile]:
        if not can_verify(caller):
            raise UnauthorizedError(
                action="list profiles",
                required="admin role",
                principal=caller.principal if caller else None,
            )
        return self.store.list_profiles()

    def save_caller_user_profile(self, principal: str, payload: Profile | dict[str, Any]) -> Profile:
        """
        Create or update the caller's own profile.

        Raises:
            UnauthorizedError: payload belongs to another principal
            ImmutableFieldError: update changes role or student id
        """
        profile = validate_schema(Profile, payload)
        if profile.principal != principal:
            raise UnauthorizedError(
                action="save profile",
                required="ownership of the profile",
                principal=principal,
            )

        existing = self.store.get_profile(principal)
        if existing is None:
            if profile.role != UserRole.USER and profile.student_id is not None:
                profile = profile.model_copy(update={"student_id": None})
            self.store.insert_profile(profile)
            logger.info(f"Profile created for {principal} with role {profile.role.value}")
            return profile

        for field in Profile.model_fields:
            if field in EDITABLE_PROFILE_FIELDS:
                continue
            if getattr(profile, field) != getattr(existing, field):
                raise ImmutableFieldError(field)

        self.store.update_profile(profile)
        logger.info(f"Profile updated for {principal}")
        return profile
