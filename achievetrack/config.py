"""
AchieveTrack Configuration

Explicit limits and settings shared by schemas, the chatbot engine and the
store. Environment-dependent values are read on call so that tests and
scripts can override them after import.
"""

import os

DEFAULT_DATABASE_URL = "sqlite:///achievetrack.db"

# (min_length, max_length) for user-entered fields
FIELD_LIMITS = {
    "student_id": (3, 20),
    "name": (2, 100),
    "title": (3, 200),
    "description": (10, 2000),
}

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

# Chatbot search settings
SEARCH = {
    "min_term_length": 3,  # tokens shorter than this are dropped
    "year_prefix": "20",   # only 2000-2099 are read as years
}


def get_database_url() -> str:
    """Return DATABASE_URL from the environment, falling back to local SQLite."""
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
