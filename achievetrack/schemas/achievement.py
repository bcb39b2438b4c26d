"""
Achievement Data Model

An achievement is owned by one student and moves through the
verification lifecycle. Snapshots are immutable: a transition produces a
new snapshot with one more history event, and the history is never
reordered or truncated.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from achievetrack.schemas.base import (
    AchievementCategory,
    Description,
    NonEmptyStr,
    StudentId,
    Title,
    VerificationStatus,
)


class VerificationEvent(BaseModel):
    """One status transition in an achievement's audit trail."""
    model_config = ConfigDict(frozen=True)

    status: VerificationStatus = Field(description="Status after the transition")
    verifier: NonEmptyStr = Field(description="Principal that performed it")
    notes: str | None = Field(default=None, description="Reviewer notes")
    timestamp: datetime = Field(description="When the transition was applied")


class Achievement(BaseModel):
    """
    Stored achievement record.

    Invariant: an empty history means `pending`; otherwise the latest
    event's status is the current status.
    """
    model_config = ConfigDict(frozen=True)

    achievement_id: NonEmptyStr
    student_id: NonEmptyStr
    student_principal: NonEmptyStr
    title: str
    description: str
    category: AchievementCategory
    date: datetime
    links: list[str] | None = None
    certificate_image: str | None = Field(
        default=None,
        description="Opaque reference to an externally stored image",
    )
    status: VerificationStatus = VerificationStatus.PENDING
    verification_history: tuple[VerificationEvent, ...] = ()

    @model_validator(mode="after")
    def check_history_matches_status(self) -> "Achievement":
        if not self.verification_history:
            if self.status != VerificationStatus.PENDING:
                raise ValueError(
                    f"status {self.status.value} requires a verification event"
                )
        elif self.verification_history[-1].status != self.status:
            raise ValueError(
                "status must equal the status of the latest verification event"
            )
        return self

    @property
    def searchable_text(self) -> str:
        """Lower-cased title and description, as used by text filtering."""
        return f"{self.title} {self.description}".lower()

    def with_event(self, event: VerificationEvent) -> "Achievement":
        """Return a new snapshot with `event` appended and the status moved."""
        return self.model_copy(
            update={
                "status": event.status,
                "verification_history": (*self.verification_history, event),
            }
        )


class AchievementInput(BaseModel):
    """
    Payload for registering a new achievement.

    `achievement_id` is derived from the student id and creation time when
    omitted. `student_principal`, when given, must be the caller.
    """
    achievement_id: NonEmptyStr | None = None
    student_id: StudentId
    student_principal: NonEmptyStr | None = None
    title: Title
    description: Description
    category: AchievementCategory
    date: datetime
    links: list[str] | None = None
    certificate_image: str | None = None

    @field_validator("student_id", "title", "description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("links")
    @classmethod
    def clean_links(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return None
        cleaned = [link.strip() for link in v if link and link.strip()]
        return cleaned or None
