"""
SQLAlchemy-backed data store for achievements and profiles.
"""

from achievetrack.store.models import Base
from achievetrack.store.repository import AchievementStore

__all__ = ["Base", "AchievementStore"]
