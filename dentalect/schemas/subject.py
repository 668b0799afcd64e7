"""Subject Schemas: Pydantic models with field-level validation for API boundaries.

Invariants:
    - SubjectCreate.name / SubjectUpdate.name: stripped, non-empty, at most 200 chars
    - FileCreate.name and FileCreate.content: non-empty after stripping
    - SubjectUpdate.files, when present, replaces the whole files list
    - Unknown fields (including a client-chosen subject id) are ignored

Design Decisions:
    - field_validator for side-effect-free transforms (strip), keeps models pure
    - content is checked for blankness but stored exactly as sent
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dentalect.core.domain_types import (
    FILE_NAME_MAX_LENGTH, SUBJECT_NAME_MAX_LENGTH,
)


def _strip_required(value: str, field_name: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{field_name} cannot be empty or whitespace")
    return value


class SubjectCreate(BaseModel):
    """Subject creation: only the name is client-controlled."""
    name: str = Field(min_length=1, max_length=SUBJECT_NAME_MAX_LENGTH)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_required(v, "name")


class FileCreate(BaseModel):
    """New file for an existing subject."""
    name: str = Field(min_length=1, max_length=FILE_NAME_MAX_LENGTH)
    content: str = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_required(v, "name")

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        _strip_required(v, "content")
        return v


class FileReplacement(FileCreate):
    """Entry of a whole-list replacement; keeps its id when it has one."""
    id: str | None = Field(None, max_length=64)


class SubjectUpdate(BaseModel):
    """Rename (name only) or replace (name + files) a subject."""
    name: str = Field(min_length=1, max_length=SUBJECT_NAME_MAX_LENGTH)
    files: list[FileReplacement] | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_required(v, "name")


class FileResponse(BaseModel):
    id: str
    name: str
    content: str


class SubjectResponse(BaseModel):
    """Subject as returned to clients."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    files: list[FileResponse] = []


class MessageResponse(BaseModel):
    message: str
