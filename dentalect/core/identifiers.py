"""Identifier Generation: server-side ids for subjects and files.

Invariants:
    - Subject ids are UUID4 hex (32 chars)
    - File ids are <base36 millisecond timestamp><7 random base36 chars>
    - new_file_id never returns an id already in `taken`

Design Decisions:
    - Clock and randomness injectable so tests stay deterministic
    - No global sequence: timestamp + random suffix is unique in practice
"""

import secrets
import string
import time
import uuid
from collections.abc import Callable, Iterable

from dentalect.core.domain_types import FileId, SubjectId

_BASE36 = string.digits + string.ascii_lowercase
FILE_ID_SUFFIX_LENGTH = 7
_MAX_FILE_ID_ATTEMPTS = 16


def to_base36(value: int) -> str:
    """Encode a non-negative int in lowercase base 36."""
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def _random_suffix(length: int = FILE_ID_SUFFIX_LENGTH) -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(length))


def new_subject_id() -> SubjectId:
    return SubjectId(uuid.uuid4().hex)


def new_file_id(
    taken: Iterable[str] = (),
    *,
    clock: Callable[[], float] = time.time,
    suffix: Callable[[], str] = _random_suffix,
) -> FileId:
    """Generate a file id not present in `taken`.

    Regenerates on collision; gives up after a fixed number of attempts,
    which only a broken `suffix` source can reach.
    """
    taken_ids = set(taken)
    for _ in range(_MAX_FILE_ID_ATTEMPTS):
        candidate = to_base36(int(clock() * 1000)) + suffix()
        if candidate not in taken_ids:
            return FileId(candidate)
    raise RuntimeError("could not generate a unique file id")
