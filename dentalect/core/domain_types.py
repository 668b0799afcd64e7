"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - SubjectId, FileId, OwnerId wrap str; ids are opaque to clients
    - StoredFile is the exact shape persisted inside a subject's files column

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - TypedDict for StoredFile: rows hold plain JSON, no custom encoders needed
"""

from typing import NewType, TypedDict


# ─── Identity Types ──────────────────────────────────────────────

SubjectId = NewType("SubjectId", str)
FileId = NewType("FileId", str)
OwnerId = NewType("OwnerId", str)


# ─── Value Types ─────────────────────────────────────────────────

class StoredFile(TypedDict):
    """One entry of Subject.files as persisted."""
    id: str
    name: str
    content: str


# ─── Limits ──────────────────────────────────────────────────────

SUBJECT_NAME_MAX_LENGTH = 200
FILE_NAME_MAX_LENGTH = 255
