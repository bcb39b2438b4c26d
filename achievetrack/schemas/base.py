"""
Base types and constants used across all schemas.

The three global enumerations are closed: every decision point that
consumes them (search strategy, permission policy, transition table)
handles each member explicitly.
"""

from enum import Enum
from typing import Annotated

from pydantic import Field

from achievetrack.config import EMAIL_PATTERN, FIELD_LIMITS


# =============================================================================
# ENUMS
# =============================================================================

class AchievementCategory(str, Enum):
    """Kind of achievement a student can register."""
    CERTIFICATE = "certificate"
    RESEARCH_PAPER = "researchPaper"
    HACKATHON = "hackathon"
    PROJECT = "project"

    @property
    def label(self) -> str:
        """Display name, e.g. 'Research Paper'."""
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    AchievementCategory.CERTIFICATE: "Certificate",
    AchievementCategory.RESEARCH_PAPER: "Research Paper",
    AchievementCategory.HACKATHON: "Hackathon",
    AchievementCategory.PROJECT: "Project",
}


class UserRole(str, Enum):
    """Role attached to a profile at creation."""
    ADMIN = "admin"  # verifier
    USER = "user"    # student
    GUEST = "guest"


class VerificationStatus(str, Enum):
    """Lifecycle state of an achievement."""
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


# =============================================================================
# ANNOTATED TYPES
# =============================================================================

def _bounded(field: str):
    low, high = FIELD_LIMITS[field]
    return Field(min_length=low, max_length=high)


NonEmptyStr = Annotated[str, Field(min_length=1)]

StudentId = Annotated[str, _bounded("student_id")]

PersonName = Annotated[str, _bounded("name")]

Title = Annotated[str, _bounded("title")]

Description = Annotated[str, _bounded("description")]

Email = Annotated[str, Field(pattern=EMAIL_PATTERN)]
