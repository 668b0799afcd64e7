"""Subject File Routes: append and remove files of one subject.

Invariants:
    - Files exist only inside a subject; there is no standalone file endpoint
    - Removal matches the file id only
    - A missing subject or file is a 404 and nothing is written
"""

from fastapi import APIRouter, Depends, status

from dentalect.api.routes.subjects import get_subject_store
from dentalect.schemas.subject import FileCreate, FileResponse, MessageResponse
from dentalect.services.subject_store import SubjectStore

router = APIRouter(prefix="/api/subjects/{subject_id}/files", tags=["files"])


@router.post(
    "", response_model=FileResponse, status_code=status.HTTP_201_CREATED,
)
async def add_file(
    subject_id: str,
    body: FileCreate,
    store: SubjectStore = Depends(get_subject_store),
):
    """Append a file; its id is generated server-side."""
    return await store.add_file(subject_id, body.name, body.content)


@router.delete("/{file_id}", response_model=MessageResponse)
async def delete_file(
    subject_id: str,
    file_id: str,
    store: SubjectStore = Depends(get_subject_store),
):
    await store.delete_file(subject_id, file_id)
    return MessageResponse(message="File deleted successfully")
