"""
Achievement Store

SQLAlchemy implementation of the data backend consumed by the chatbot
search executor, the verification service and the profile service.

Status transitions are written with a conditional UPDATE keyed on the
expected current status, in the same transaction as the history event.
Either both land or neither does.
"""

import logging

from sqlalchemy import create_engine, event, func, or_, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from achievetrack.config import get_database_url
from achievetrack.errors import (
    AchievementNotFoundError,
    DuplicateAchievementError,
    ProfileNotFoundError,
)
from achievetrack.schemas.achievement import Achievement, VerificationEvent
from achievetrack.schemas.base import AchievementCategory, UserRole, VerificationStatus
from achievetrack.schemas.profile import Profile
from achievetrack.store.models import AchievementRow, Base, ProfileRow, VerificationEventRow

logger = logging.getLogger(__name__)


def _casefold(value):
    return value.casefold() if value is not None else None


def _register_casefold(dbapi_connection, connection_record):
    # SQLite's lower() only folds ASCII letters
    dbapi_connection.create_function("casefold", 1, _casefold, deterministic=True)


def _to_achievement(row: AchievementRow) -> Achievement:
    return Achievement(
        achievement_id=row.achievement_id,
        student_id=row.student_id,
        student_principal=row.student_principal,
        title=row.title,
        description=row.description,
        category=AchievementCategory(row.category),
        date=row.date,
        links=row.links,
        certificate_image=row.certificate_image,
        status=VerificationStatus(row.status),
        verification_history=tuple(
            VerificationEvent(
                status=VerificationStatus(e.status),
                verifier=e.verifier,
                notes=e.notes,
                timestamp=e.timestamp,
            )
            for e in row.events
        ),
    )


def _event_row(achievement_id: str, sequence: int, event: VerificationEvent) -> VerificationEventRow:
    return VerificationEventRow(
        achievement_id=achievement_id,
        sequence=sequence,
        status=event.status.value,
        verifier=event.verifier,
        notes=event.notes,
        timestamp=event.timestamp,
    )


def _to_profile(row: ProfileRow) -> Profile:
    return Profile(
        principal=row.principal,
        role=UserRole(row.role),
        student_id=row.student_id,
        name=row.name,
        email=row.email,
        bio=row.bio,
    )


class AchievementStore:
    """Achievements, verification history and profiles in one database."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
        self.unicode_fold = engine.dialect.name == "sqlite"
        if self.unicode_fold:
            event.listen(engine, "connect", _register_casefold)

    @classmethod
    def from_url(cls, url: str | None = None, **engine_kwargs) -> "AchievementStore":
        return cls(create_engine(url or get_database_url(), **engine_kwargs))

    def init_db(self) -> None:
        Base.metadata.create_all(self.engine)

    # =========================================================================
    # ACHIEVEMENT READS
    # =========================================================================

    def _select(self, *criteria) -> list[Achievement]:
        stmt = select(AchievementRow)
        if criteria:
            stmt = stmt.where(*criteria)
        stmt = stmt.order_by(AchievementRow.date, AchievementRow.achievement_id)
        with self.SessionLocal() as session:
            return [_to_achievement(row) for row in session.scalars(stmt)]

    def get_achievement(self, achievement_id: str) -> Achievement:
        with self.SessionLocal() as session:
            row = session.get(AchievementRow, achievement_id)
            if row is None:
                raise AchievementNotFoundError(achievement_id)
            return _to_achievement(row)

    def get_achievements_by_student_id(self, student_id: str) -> list[Achievement]:
        return self._select(AchievementRow.student_id == student_id)

    def get_verified_achievements_by_category(
        self, category: AchievementCategory
    ) -> list[Achievement]:
        return self._select(
            AchievementRow.category == AchievementCategory(category).value,
            AchievementRow.status == VerificationStatus.VERIFIED.value,
        )

    def search_achievements(self, term: str) -> list[Achievement]:
        """Case-insensitive substring match of `term` on title or description."""
        needle = (term or "").strip()
        if not needle:
            return []
        if self.unicode_fold:
            fold, needle = func.casefold, needle.casefold()
        else:
            fold, needle = func.lower, needle.lower()
        return self._select(
            or_(
                fold(AchievementRow.title).contains(needle, autoescape=True),
                fold(AchievementRow.description).contains(needle, autoescape=True),
            )
        )

    def get_pending_achievements(self) -> list[Achievement]:
        return self._select(AchievementRow.status == VerificationStatus.PENDING.value)

    # =========================================================================
    # ACHIEVEMENT WRITES
    # =========================================================================

    def insert_achievement(self, achievement: Achievement) -> None:
        """
        Persist a new achievement with its history.

        Raises:
            DuplicateAchievementError: the id is already taken
        """
        row = AchievementRow(
            achievement_id=achievement.achievement_id,
            student_id=achievement.student_id,
            student_principal=achievement.student_principal,
            title=achievement.title,
            description=achievement.description,
            category=achievement.category.value,
            date=achievement.date,
            links=achievement.links,
            certificate_image=achievement.certificate_image,
            status=achievement.status.value,
        )
        try:
            with self.SessionLocal.begin() as session:
                if session.get(AchievementRow, achievement.achievement_id) is not None:
                    raise DuplicateAchievementError(achievement.achievement_id)
                session.add(row)
                session.add_all(
                    _event_row(achievement.achievement_id, i, event)
                    for i, event in enumerate(achievement.verification_history)
                )
        except IntegrityError as e:
            raise DuplicateAchievementError(achievement.achievement_id) from e

    def compare_and_set_status(
        self,
        achievement_id: str,
        expected: VerificationStatus,
        updated: Achievement,
    ) -> bool:
        """
        Store `updated`'s status and latest event if the row is still `expected`.

        Returns False, writing nothing, when the stored status has moved on.
        """
        if updated.achievement_id != achievement_id or not updated.verification_history:
            raise ValueError("updated snapshot must be a transition of the same achievement")

        sequence = len(updated.verification_history) - 1
        event = updated.verification_history[-1]
        try:
            with self.SessionLocal.begin() as session:
                result = session.execute(
                    update(AchievementRow)
                    .where(
                        AchievementRow.achievement_id == achievement_id,
                        AchievementRow.status == VerificationStatus(expected).value,
                    )
                    .values(status=updated.status.value)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount != 1:
                    return False
                session.add(_event_row(achievement_id, sequence, event))
        except IntegrityError:
            logger.warning(f"History slot {sequence} of {achievement_id} already written")
            return False
        return True

    # =========================================================================
    # PROFILES
    # =========================================================================

    def get_profile(self, principal: str) -> Profile | None:
        with self.SessionLocal() as session:
            row = session.get(ProfileRow, principal)
            return _to_profile(row) if row is not None else None

    def list_profiles(self) -> list[Profile]:
        with self.SessionLocal() as session:
            rows = session.scalars(select(ProfileRow).order_by(ProfileRow.principal))
            return [_to_profile(row) for row in rows]

    def insert_profile(self, profile: Profile) -> None:
        with self.SessionLocal.begin() as session:
            session.add(
                ProfileRow(
                    principal=profile.principal,
                    role=profile.role.value,
                    student_id=profile.student_id,
                    name=profile.name,
                    email=profile.email,
                    bio=profile.bio,
                )
            )

    def update_profile(self, profile: Profile) -> None:
        """Overwrite the editable fields of an existing profile."""
        with self.SessionLocal.begin() as session:
            row = session.get(ProfileRow, profile.principal)
            if row is None:
                raise ProfileNotFoundError(profile.principal)
            row.name = profile.name
            row.email = profile.email
            row.bio = profile.bio
