"""
Chatbot Search Executor

Runs ChatbotFilters against the achievement store. Exactly one store
primitive is called, chosen by strict priority (student id, then
category, then free text); filters the primitive could not apply are
then applied in memory. Result order is the store's order.
"""

import logging
from typing import Protocol

from achievetrack.chatbot.parser import FilterExtractor, parse_prompt
from achievetrack.schemas.achievement import Achievement
from achievetrack.schemas.base import AchievementCategory
from achievetrack.schemas.chatbot import (
    ChatbotFilters,
    ChatbotSearchResult,
    NeedsClarification,
    SearchStrategy,
)

logger = logging.getLogger(__name__)


class AchievementLookup(Protocol):
    """Read primitives the executor needs from the data backend."""

    def get_achievements_by_student_id(self, student_id: str) -> list[Achievement]:
        """All achievements of a student, any status."""
        ...

    def get_verified_achievements_by_category(
        self, category: AchievementCategory
    ) -> list[Achievement]:
        """Only verified achievements of the category."""
        ...

    def search_achievements(self, term: str) -> list[Achievement]:
        """Free-text search over title and description."""
        ...


def select_strategy(filters: ChatbotFilters) -> SearchStrategy:
    if filters.student_id:
        return SearchStrategy.STUDENT_ID
    if filters.category:
        return SearchStrategy.CATEGORY
    if filters.text_terms:
        return SearchStrategy.TEXT
    return SearchStrategy.NONE


def _fetch(
    strategy: SearchStrategy, filters: ChatbotFilters, store: AchievementLookup
) -> list[Achievement]:
    if strategy == SearchStrategy.STUDENT_ID:
        return list(store.get_achievements_by_student_id(filters.student_id))
    if strategy == SearchStrategy.CATEGORY:
        return list(store.get_verified_achievements_by_category(filters.category))
    if strategy == SearchStrategy.TEXT:
        return list(store.search_achievements(" ".join(filters.text_terms)))
    if strategy == SearchStrategy.NONE:
        return []
    raise ValueError(f"Unhandled search strategy: {strategy}")


def _matches_any_term(achievement: Achievement, terms: list[str]) -> bool:
    text = achievement.searchable_text
    return any(term.lower() in text for term in terms)


def execute_search(filters: ChatbotFilters, store: AchievementLookup) -> list[Achievement]:
    """
    Retrieve achievements for the given filters.

    Post-filters, in order:
    1. category, when the student-id primitive was used
    2. year, on each achievement's own calendar date
    3. text terms (any term matches), when the student-id primitive was used
    """
    return _execute(filters, store)[0]


def _execute(
    filters: ChatbotFilters, store: AchievementLookup
) -> tuple[list[Achievement], SearchStrategy]:
    strategy = select_strategy(filters)
    achievements = _fetch(strategy, filters, store)
    fetched = len(achievements)

    if filters.category and strategy == SearchStrategy.STUDENT_ID:
        achievements = [a for a in achievements if a.category == filters.category]

    if filters.year is not None:
        achievements = [a for a in achievements if a.date.year == filters.year]

    if filters.text_terms and strategy == SearchStrategy.STUDENT_ID:
        achievements = [a for a in achievements if _matches_any_term(a, filters.text_terms)]

    logger.info(
        f"Chatbot search via {strategy.value}: {fetched} fetched, {len(achievements)} kept"
    )
    return achievements, strategy


def run_chatbot_search(filters: ChatbotFilters, store: AchievementLookup) -> ChatbotSearchResult:
    """Execute a search and report the filters and strategy that produced it."""
    achievements, strategy = _execute(filters, store)
    return ChatbotSearchResult(
        achievements=achievements,
        applied_filters=filters,
        strategy=strategy,
    )


def answer_prompt(
    prompt: str,
    store: AchievementLookup,
    extractor: FilterExtractor | None = None,
) -> ChatbotSearchResult | NeedsClarification:
    """Parse a chat prompt and search, or hand back the clarification request."""
    parsed = extractor.extract(prompt) if extractor else parse_prompt(prompt)
    if isinstance(parsed, NeedsClarification):
        return parsed
    return run_chatbot_search(parsed.filters, store)
