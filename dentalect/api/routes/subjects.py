"""Subject Routes: list, fetch, create, rename/replace and delete subjects.

Invariants:
    - Bodies validated by Pydantic before reaching the handler
    - Subject ids are generated server-side; a client-sent id is ignored
    - DELETE is idempotent: 204 whether or not the subject existed
    - get_subject_store exported for reuse by subject_files
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from dentalect.config import Settings, get_settings
from dentalect.infrastructure.database import get_db
from dentalect.schemas.subject import SubjectCreate, SubjectResponse, SubjectUpdate
from dentalect.services.subject_store import SubjectStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/subjects", tags=["subjects"])


async def get_subject_store(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> SubjectStore:
    """Request-scoped store bound to the configured owner."""
    return SubjectStore(
        db,
        owner_id=settings.owner_id,
        max_attempts=settings.store_max_conflict_retries,
    )


@router.get("", response_model=list[SubjectResponse])
async def list_subjects(store: SubjectStore = Depends(get_subject_store)):
    return await store.list_subjects()


@router.get("/{subject_id}", response_model=SubjectResponse)
async def get_subject(
    subject_id: str, store: SubjectStore = Depends(get_subject_store),
):
    return await store.get_subject(subject_id)


@router.post(
    "", response_model=SubjectResponse, status_code=status.HTTP_201_CREATED,
)
async def create_subject(
    body: SubjectCreate, store: SubjectStore = Depends(get_subject_store),
):
    """Create a subject with an empty files list."""
    return await store.create_subject(body.name)


@router.put("/{subject_id}", response_model=SubjectResponse)
async def update_subject(
    subject_id: str,
    body: SubjectUpdate,
    store: SubjectStore = Depends(get_subject_store),
):
    """Rename a subject; with `files` in the body, replace its files too."""
    files = (
        [f.model_dump() for f in body.files] if body.files is not None else None
    )
    return await store.update_subject(subject_id, body.name, files)


@router.delete("/{subject_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subject(
    subject_id: str, store: SubjectStore = Depends(get_subject_store),
):
    await store.delete_subject(subject_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
