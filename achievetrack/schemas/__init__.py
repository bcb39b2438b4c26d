"""
AchieveTrack Schemas Package

Pydantic models for achievements, profiles and chatbot queries.
"""

from achievetrack.schemas.base import AchievementCategory, UserRole, VerificationStatus
from achievetrack.schemas.achievement import Achievement, AchievementInput, VerificationEvent
from achievetrack.schemas.profile import EDITABLE_PROFILE_FIELDS, Profile
from achievetrack.schemas.chatbot import (
    ChatbotFilters,
    ChatbotSearchResult,
    NeedsClarification,
    ParseResult,
    ParseSuccess,
    SearchStrategy,
)

__all__ = [
    "AchievementCategory",
    "UserRole",
    "VerificationStatus",
    "Achievement",
    "AchievementInput",
    "VerificationEvent",
    "EDITABLE_PROFILE_FIELDS",
    "Profile",
    "ChatbotFilters",
    "ChatbotSearchResult",
    "NeedsClarification",
    "ParseResult",
    "ParseSuccess",
    "SearchStrategy",
]
