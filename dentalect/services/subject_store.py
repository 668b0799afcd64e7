"""Subject Store: every subject/file operation as one read or write against the database.

Invariants:
    - All queries are scoped to the store's owner_id
    - Read-modify-write edits run under the version guard and retry on StaleDataError
      up to max_attempts, then raise ConcurrencyError (409)
    - A missing subject or file raises ResourceNotFoundError before anything is written
    - Any other SQLAlchemy failure is rolled back and raised as DatabaseError (500)

Design Decisions:
    - Pure list edits live in core/subject_files.py; this class only does IO around them
    - Mutations return plain documents, so routes never touch ORM objects
"""

import logging
from collections.abc import Callable, Sequence
from contextlib import asynccontextmanager
from typing import AsyncIterator, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from dentalect.core.domain_types import StoredFile
from dentalect.core.errors import (
    ConcurrencyError, DatabaseError, DentalectError, ErrorContext,
    ResourceNotFoundError,
)
from dentalect.core.identifiers import new_file_id, new_subject_id
from dentalect.core.subject_files import append_file, remove_file, replace_files
from dentalect.models.subject import Subject as SubjectModel

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SubjectStore:
    """Owner-scoped access to subjects and their files."""

    def __init__(
        self,
        db: AsyncSession,
        owner_id: str,
        max_attempts: int = 3,
        make_file_id: Callable = new_file_id,
    ):
        self._db = db
        self._owner_id = owner_id
        self._max_attempts = max(1, max_attempts)
        self._make_file_id = make_file_id

    # ─── Reads ──────────────────────────────────────────────────

    async def list_subjects(self) -> list[dict]:
        """All subjects of the owner, in insertion order."""
        async with self._store_errors("list"):
            result = await self._db.execute(
                select(SubjectModel)
                .where(SubjectModel.owner_id == self._owner_id)
                .order_by(SubjectModel.seq),
            )
            return [s.to_document() for s in result.scalars().all()]

    async def get_subject(self, subject_id: str) -> dict:
        async with self._store_errors("get"):
            subject = await self._load_or_404(subject_id)
            return subject.to_document()

    async def count_subjects(self) -> int:
        async with self._store_errors("count"):
            result = await self._db.execute(
                select(func.count())
                .select_from(SubjectModel)
                .where(SubjectModel.owner_id == self._owner_id),
            )
            return int(result.scalar_one())

    # ─── Subject writes ─────────────────────────────────────────

    async def create_subject(
        self, name: str, files: Sequence[dict] = (),
    ) -> dict:
        """Insert a new subject with a server-generated id."""
        subject = SubjectModel(
            id=new_subject_id(),
            owner_id=self._owner_id,
            name=name,
            files=replace_files(files, self._make_file_id),
        )
        async with self._store_errors("create"):
            self._db.add(subject)
            await self._db.commit()
        logger.info(
            f"Subject created: {subject.name}",
            extra={"subject_id": subject.id, "owner_id": self._owner_id},
        )
        return subject.to_document()

    async def update_subject(
        self, subject_id: str, name: str, files: Sequence[dict] | None = None,
    ) -> dict:
        """Rename a subject, or replace its name and whole files list."""
        def edit(subject: SubjectModel) -> dict:
            if files is not None:
                subject.files = replace_files(files, self._make_file_id)
            subject.name = name
            return subject.to_document()

        return await self._mutate(subject_id, edit, "update")

    async def delete_subject(self, subject_id: str) -> bool:
        """Delete a subject and its files. Returns whether a row existed."""
        async with self._store_errors("delete"):
            result = await self._db.execute(
                delete(SubjectModel).where(
                    SubjectModel.id == subject_id,
                    SubjectModel.owner_id == self._owner_id,
                ),
            )
            await self._db.commit()
        deleted = result.rowcount > 0
        logger.info(
            "Subject deleted" if deleted else "Subject already absent",
            extra={"subject_id": subject_id, "owner_id": self._owner_id},
        )
        return deleted

    # ─── File writes ────────────────────────────────────────────

    async def add_file(self, subject_id: str, name: str, content: str) -> StoredFile:
        """Append a file to the end of the subject's files."""
        def edit(subject: SubjectModel) -> StoredFile:
            subject.files, new_file = append_file(
                subject.files or [], name, content, self._make_file_id,
            )
            return new_file

        new_file = await self._mutate(subject_id, edit, "add_file")
        logger.info(
            f"File added: {name}",
            extra={"subject_id": subject_id, "file_id": new_file["id"]},
        )
        return new_file

    async def delete_file(self, subject_id: str, file_id: str) -> StoredFile:
        """Remove exactly the file with this id; other files keep their order."""
        def edit(subject: SubjectModel) -> StoredFile:
            outcome = remove_file(subject.files or [], file_id)
            if outcome is None:
                raise ResourceNotFoundError(
                    "File", file_id,
                    ErrorContext(subject_id=subject_id, file_id=file_id),
                )
            subject.files, removed = outcome
            return removed

        removed = await self._mutate(subject_id, edit, "delete_file")
        logger.info(
            "File deleted",
            extra={"subject_id": subject_id, "file_id": file_id},
        )
        return removed

    # ─── Seeding ────────────────────────────────────────────────

    async def seed_if_empty(self, samples: Sequence[dict]) -> int:
        """Create the sample subjects when the owner has none. Returns how many were created."""
        if await self.count_subjects() > 0:
            return 0
        for sample in samples:
            await self.create_subject(sample["name"], sample.get("files", ()))
        logger.info(
            f"Seeded {len(samples)} sample subject(s)",
            extra={"owner_id": self._owner_id},
        )
        return len(samples)

    # ─── Internals ──────────────────────────────────────────────

    async def _load_or_404(self, subject_id: str) -> SubjectModel:
        result = await self._db.execute(
            select(SubjectModel)
            .where(
                SubjectModel.id == subject_id,
                SubjectModel.owner_id == self._owner_id,
            )
            .execution_options(populate_existing=True),
        )
        subject = result.scalar_one_or_none()
        if subject is None:
            raise ResourceNotFoundError(
                "Subject", subject_id, ErrorContext(subject_id=subject_id),
            )
        return subject

    async def _mutate(
        self,
        subject_id: str,
        edit: Callable[[SubjectModel], T],
        operation: str,
    ) -> T:
        """Load, edit and commit one subject under the version guard."""
        for attempt in range(1, self._max_attempts + 1):
            async with self._store_errors(operation):
                subject = await self._load_or_404(subject_id)
                outcome = edit(subject)
                try:
                    await self._db.commit()
                except StaleDataError:
                    await self._db.rollback()
                    logger.warning(
                        f"Concurrent update on subject during {operation}, retrying",
                        extra={"subject_id": subject_id, "attempt": attempt},
                    )
                    continue
                return outcome
        raise ConcurrencyError(
            f"Subject '{subject_id}' was modified concurrently, please retry",
            ErrorContext(subject_id=subject_id, attempts=self._max_attempts),
        )

    @asynccontextmanager
    async def _store_errors(self, operation: str) -> AsyncIterator[None]:
        """Roll back and translate SQLAlchemy failures; domain errors pass through."""
        try:
            yield
        except DentalectError:
            await self._db.rollback()
            raise
        except SQLAlchemyError as e:
            await self._db.rollback()
            logger.error(
                f"Store {operation} failed: {e}",
                extra={"owner_id": self._owner_id},
            )
            raise DatabaseError("Store operation failed", operation) from e
