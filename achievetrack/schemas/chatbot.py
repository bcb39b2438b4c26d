"""
Chatbot Query Schemas

Filters extracted from a natural-language prompt, the two parse
outcomes, and the search result handed back to the chat UI. None of
these are persisted.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from achievetrack.schemas.achievement import Achievement
from achievetrack.schemas.base import AchievementCategory


class ChatbotFilters(BaseModel):
    """Structured, partial query produced by the filter extractor."""
    student_id: str | None = None
    category: AchievementCategory | None = None
    text_terms: list[str] = Field(default_factory=list)
    year: int | None = None


class ParseSuccess(BaseModel):
    type: Literal["success"] = "success"
    filters: ChatbotFilters


class NeedsClarification(BaseModel):
    """Not an error: the prompt did not carry enough to search on."""
    type: Literal["clarification"] = "clarification"
    message: str


ParseResult = Annotated[
    Union[ParseSuccess, NeedsClarification],
    Field(discriminator="type"),
]


class SearchStrategy(str, Enum):
    """Which store primitive answered a chatbot search."""
    STUDENT_ID = "student_id"
    CATEGORY = "category"
    TEXT = "text"
    NONE = "none"


class ChatbotSearchResult(BaseModel):
    achievements: list[Achievement]
    applied_filters: ChatbotFilters
    strategy: SearchStrategy
