"""
Chatbot Prompt Parser

Turns a free-form request such as "Show projects for student STU12345"
into ChatbotFilters. Matching is deterministic: an ordered table of
extraction rules fills the student id, category and year, then the
remaining words become free-text terms.

Insufficient input resolves to NeedsClarification, never to an
exception or a silently empty search.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable

from achievetrack.config import SEARCH
from achievetrack.schemas.base import AchievementCategory
from achievetrack.schemas.chatbot import (
    ChatbotFilters,
    NeedsClarification,
    ParseSuccess,
)

logger = logging.getLogger(__name__)


# Priority order matters: the first group found anywhere in the prompt wins.
CATEGORY_KEYWORDS: tuple[tuple[AchievementCategory, tuple[str, ...]], ...] = (
    (AchievementCategory.PROJECT, ("project",)),
    (AchievementCategory.RESEARCH_PAPER, ("research", "paper")),
    (AchievementCategory.HACKATHON, ("hackathon",)),
    (AchievementCategory.CERTIFICATE, ("certificate",)),
)

_missing = set(AchievementCategory) - {category for category, _ in CATEGORY_KEYWORDS}
if _missing:
    raise RuntimeError(f"No chatbot keywords for categories: {sorted(c.value for c in _missing)}")

ALL_CATEGORY_KEYWORDS = tuple(kw for _, group in CATEGORY_KEYWORDS for kw in group)

STOP_WORDS = frozenset({
    "show", "find", "search", "get", "list", "display", "for", "student",
    "the", "all", "in", "from", "with", "about", "of", "by",
})

CLARIFICATION_MESSAGE = (
    "I need more information to search. Please try:\n\n"
    '• "Show projects for student STU12345"\n'
    '• "Find hackathon wins in 2024"\n'
    '• "Search for machine learning projects"\n'
    '• "Show all verified certificates"'
)


@dataclass(frozen=True)
class ExtractionRule:
    """
    One row of the extraction table.

    `lowered` selects whether the pattern runs on the lower-cased prompt
    or on the original text.
    """
    field: str
    pattern: re.Pattern
    build: Callable[[re.Match], Any]
    lowered: bool = False

    def apply(self, prompt: str, lowered_prompt: str) -> Any | None:
        match = self.pattern.search(lowered_prompt if self.lowered else prompt)
        return self.build(match) if match else None


def _category_rule(category: AchievementCategory, keywords: tuple[str, ...]) -> ExtractionRule:
    return ExtractionRule(
        field="category",
        pattern=re.compile("|".join(re.escape(kw) for kw in keywords)),
        build=lambda _match: category,
        lowered=True,
    )


EXTRACTION_RULES: tuple[ExtractionRule, ...] = (
    ExtractionRule(
        field="student_id",
        pattern=re.compile(r"\b(stu\d+|\d{4,})\b", re.IGNORECASE),
        build=lambda m: m.group(0).upper(),
    ),
    *(_category_rule(category, keywords) for category, keywords in CATEGORY_KEYWORDS),
    ExtractionRule(
        field="year",
        pattern=re.compile(rf"\b({SEARCH['year_prefix']}\d{{2}})\b"),
        build=lambda m: int(m.group(1)),
    ),
)


class FilterExtractor:
    """Rule-table parser from prompt text to ChatbotFilters."""

    def __init__(
        self,
        rules: tuple[ExtractionRule, ...] = EXTRACTION_RULES,
        stop_words: frozenset[str] = STOP_WORDS,
        category_keywords: tuple[str, ...] = ALL_CATEGORY_KEYWORDS,
        min_term_length: int = SEARCH["min_term_length"],
    ):
        self.rules = rules
        self.stop_words = stop_words
        self.category_keywords = category_keywords
        self.min_term_length = min_term_length

    def extract(self, prompt: str | None) -> ParseSuccess | NeedsClarification:
        """
        Parse a prompt into filters or ask for clarification.

        A prompt qualifies for a search when it yields a student id, a
        category or at least one free-text term. A year alone does not.
        """
        prompt = prompt if isinstance(prompt, str) else ""
        lowered = prompt.lower()

        values: dict[str, Any] = {}
        for rule in self.rules:
            if rule.field in values:
                continue
            value = rule.apply(prompt, lowered)
            if value is not None:
                values[rule.field] = value

        filters = ChatbotFilters(
            **values,
            text_terms=self._text_terms(lowered, values.get("student_id")),
        )

        if not filters.student_id and not filters.category and not filters.text_terms:
            logger.debug(f"Prompt needs clarification: {prompt!r}")
            return NeedsClarification(message=CLARIFICATION_MESSAGE)

        logger.debug(f"Extracted filters {filters.model_dump()} from {prompt!r}")
        return ParseSuccess(filters=filters)

    def _text_terms(self, lowered: str, student_id: str | None) -> list[str]:
        """Words left after stop words, category keywords and the student id."""
        words = re.sub(r"[^\w\s]", " ", lowered).split()
        student_token = student_id.lower() if student_id else None

        terms = []
        for word in words:
            if len(word) < self.min_term_length or word in self.stop_words:
                continue
            # Containment, not equality: inflected forms such as "projects" and
            # "papers" must not become terms. Words like "projector" go too.
            if any(kw in word for kw in self.category_keywords):
                continue
            if student_token and student_token in word:
                continue
            terms.append(word)
        return terms


_default_extractor = FilterExtractor()


def parse_prompt(prompt: str | None) -> ParseSuccess | NeedsClarification:
    """Parse with the default rule table."""
    return _default_extractor.extract(prompt)
