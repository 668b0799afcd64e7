"""Subject ORM: one row per subject, its files embedded as a JSON document.

Invariants:
    - id is a server-generated string, unique across all rows
    - seq is an autoincrement primary key; listing by seq is insertion order
    - every row belongs to exactly one owner_id
    - files is an ordered JSON array of {id, name, content}
    - version is bumped by SQLAlchemy on every UPDATE (optimistic locking)

Design Decisions:
    - JSON column for files: a subject is read and written as one document
    - version_id_col turns a lost update into StaleDataError instead of a silent overwrite
    - Deleting the row deletes its files; there is nothing else to cascade
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column

from dentalect.core.domain_types import SUBJECT_NAME_MAX_LENGTH
from dentalect.core.identifiers import new_subject_id
from dentalect.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Subject(Base):
    """Subject aggregate root, owns its files."""
    __tablename__ = "subjects"

    seq: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    id: Mapped[str] = mapped_column(
        String(64), nullable=False, default=new_subject_id,
    )
    owner_id: Mapped[str] = mapped_column(String(128), nullable=False)
    name: Mapped[str] = mapped_column(
        String(SUBJECT_NAME_MAX_LENGTH), nullable=False,
    )
    files: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=_utcnow, onupdate=_utcnow,
    )

    __table_args__ = (
        Index("ix_subjects_id", "id", unique=True),
        Index("ix_subjects_owner_seq", "owner_id", "seq"),
    )
    __mapper_args__ = {"version_id_col": version}

    def to_document(self) -> dict:
        """Public document shape: {id, name, files}."""
        return {
            "id": self.id,
            "name": self.name,
            "files": [dict(f) for f in self.files or []],
        }
