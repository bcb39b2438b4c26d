"""
Profile Data Model

One profile per principal, created at first login. Only name, email and
bio may change afterwards.
"""

from pydantic import BaseModel, Field

from achievetrack.schemas.base import Email, NonEmptyStr, PersonName, StudentId, UserRole

# Fields a profile owner may edit after creation
EDITABLE_PROFILE_FIELDS = frozenset({"name", "email", "bio"})


class Profile(BaseModel):
    """User profile keyed by principal."""
    principal: NonEmptyStr = Field(description="Owning identity, unique")
    role: UserRole
    student_id: StudentId | None = Field(
        default=None,
        description="Business identifier, expected for the user role",
    )
    name: PersonName
    email: Email
    bio: str | None = None
