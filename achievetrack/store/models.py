"""
Store Tables

SQLAlchemy mappings for achievements, their verification events and
profiles. Events are keyed by (achievement_id, sequence) so a history
slot can only be written once.

Dates are stored as ISO-8601 text so the UTC offset survives a round
trip on every backend, SQLite included.
"""

from datetime import datetime

from sqlalchemy import (
    JSON,
    Column,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.types import TypeDecorator

Base = declarative_base()


class IsoDateTime(TypeDecorator):
    """
    Datetime kept as fixed-width ISO-8601 text.

    Naive values come back naive and aware values keep their offset.
    Values with the same offset sort chronologically.
    """
    impl = String(32)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return value.isoformat(timespec="microseconds")

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return datetime.fromisoformat(value)


class AchievementRow(Base):
    __tablename__ = "achievements"

    achievement_id = Column(String, primary_key=True)
    student_id = Column(String, nullable=False, index=True)
    student_principal = Column(String, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String, nullable=False, index=True)
    date = Column(IsoDateTime, nullable=False)
    links = Column(JSON, nullable=True)
    certificate_image = Column(String, nullable=True)
    status = Column(String, nullable=False, index=True, default="pending")

    events = relationship(
        "VerificationEventRow",
        order_by="VerificationEventRow.sequence",
        lazy="selectin",
    )


class VerificationEventRow(Base):
    __tablename__ = "verification_events"
    __table_args__ = (UniqueConstraint("achievement_id", "sequence"),)

    id = Column(Integer, primary_key=True)
    achievement_id = Column(
        String, ForeignKey("achievements.achievement_id"), nullable=False, index=True
    )
    sequence = Column(Integer, nullable=False)
    status = Column(String, nullable=False)
    verifier = Column(String, nullable=False)
    notes = Column(Text, nullable=True)
    timestamp = Column(IsoDateTime, nullable=False)


class ProfileRow(Base):
    __tablename__ = "profiles"

    principal = Column(String, primary_key=True)
    role = Column(String, nullable=False)
    student_id = Column(String, nullable=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    bio = Column(Text, nullable=True)
