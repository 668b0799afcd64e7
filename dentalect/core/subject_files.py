"""Subject File Edits: pure transformations of a subject's files sequence.

Invariants:
    - Inputs are never mutated; every edit returns a fresh list
    - Appends go to the end; removals preserve the order of remaining files
    - Removal matches on file id only, so identical name/content pairs stay distinct
    - Output lists never contain two files with the same id

Design Decisions:
    - Fresh lists so the ORM JSON column sees a new value and issues an UPDATE
    - Id generation passed in as a callable; this module does no IO
"""

from collections.abc import Callable, Iterable, Mapping, Sequence

from dentalect.core.domain_types import StoredFile
from dentalect.core.errors import SubjectValidationError

IdFactory = Callable[[Iterable[str]], str]


def file_ids(files: Sequence[Mapping]) -> list[str]:
    return [str(f.get("id", "")) for f in files]


def append_file(
    files: Sequence[StoredFile], name: str, content: str, make_id: IdFactory,
) -> tuple[list[StoredFile], StoredFile]:
    """Return (new files list, appended file)."""
    new_file = StoredFile(
        id=make_id(file_ids(files)), name=name, content=content,
    )
    return [*files, new_file], new_file


def remove_file(
    files: Sequence[StoredFile], file_id: str,
) -> tuple[list[StoredFile], StoredFile] | None:
    """Return (new files list, removed file), or None when no file has that id."""
    for index, stored in enumerate(files):
        if stored.get("id") == file_id:
            return [*files[:index], *files[index + 1:]], stored
    return None


def replace_files(
    incoming: Sequence[Mapping], make_id: IdFactory,
) -> list[StoredFile]:
    """Build a whole new files list from client-supplied entries.

    Entries keep their id when given one; the rest get fresh ids that do
    not clash with any supplied id. Duplicate supplied ids are rejected.
    """
    supplied = [str(f["id"]) for f in incoming if f.get("id")]
    duplicates = sorted({i for i in supplied if supplied.count(i) > 1})
    if duplicates:
        raise SubjectValidationError(
            f"Duplicate file ids: {', '.join(duplicates)}", field="files",
        )

    taken = set(supplied)
    result: list[StoredFile] = []
    for entry in incoming:
        file_id = str(entry.get("id") or "")
        if not file_id:
            file_id = make_id(taken)
            taken.add(file_id)
        result.append(StoredFile(
            id=file_id, name=entry["name"], content=entry["content"],
        ))
    return result
