"""
Chatbot query engine: prompt parsing and filtered search.
"""

from achievetrack.chatbot.parser import FilterExtractor, parse_prompt
from achievetrack.chatbot.search import (
    AchievementLookup,
    answer_prompt,
    execute_search,
    run_chatbot_search,
    select_strategy,
)

__all__ = [
    "FilterExtractor",
    "parse_prompt",
    "AchievementLookup",
    "answer_prompt",
    "execute_search",
    "run_chatbot_search",
    "select_strategy",
]
