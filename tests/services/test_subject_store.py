"""SubjectStore: owner scoping, file edits, seeding and the optimistic-lock retry loop.

Invariants:
    - Lost updates surface as StaleDataError and are retried on fresh data
    - After max_attempts conflicts, ConcurrencyError is raised and nothing is written
    - Not-found paths write nothing
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy import update
from sqlalchemy.orm.exc import StaleDataError

from dentalect.core.errors import (
    ConcurrencyError, ResourceNotFoundError, SubjectValidationError,
)
from dentalect.core.sample_subjects import SAMPLE_SUBJECTS
import dentalect.services.subject_store as subject_store_module
from dentalect.models.subject import Subject as SubjectModel
from dentalect.services.subject_store import SubjectStore


async def test_create_and_list(store):
    created = await store.create_subject("Anatomy")
    assert created["files"] == []
    assert await store.list_subjects() == [created]


async def test_list_is_scoped_to_owner(store, test_db):
    await store.create_subject("Mine")
    other = SubjectStore(test_db, owner_id="owner-b")
    await other.create_subject("Theirs")

    assert [s["name"] for s in await store.list_subjects()] == ["Mine"]
    assert [s["name"] for s in await other.list_subjects()] == ["Theirs"]


async def test_list_keeps_insertion_order_when_timestamps_tie(store, test_db, monkeypatch):
    ids = iter(["sub-c", "sub-b", "sub-a"])
    monkeypatch.setattr(subject_store_module, "new_subject_id", lambda: next(ids))
    for name in ("First", "Second", "Third"):
        await store.create_subject(name)

    same_instant = datetime(2026, 1, 1, tzinfo=timezone.utc)
    await test_db.execute(update(SubjectModel).values(created_at=same_instant))
    await test_db.commit()

    listed = await store.list_subjects()
    assert [s["name"] for s in listed] == ["First", "Second", "Third"]
    assert [s["id"] for s in listed] == ["sub-c", "sub-b", "sub-a"]


async def test_get_missing_subject_raises(store):
    with pytest.raises(ResourceNotFoundError) as exc_info:
        await store.get_subject("nope")
    assert exc_info.value.http_status == 404
    assert exc_info.value.context.subject_id == "nope"


async def test_add_and_delete_file(store):
    subject = await store.create_subject("Anatomy")
    a = await store.add_file(subject["id"], "a.txt", "A")
    b = await store.add_file(subject["id"], "b.txt", "B")

    removed = await store.delete_file(subject["id"], a["id"])

    assert removed == a
    assert (await store.get_subject(subject["id"]))["files"] == [b]


async def test_delete_missing_file_raises_and_keeps_files(store):
    subject = await store.create_subject("Anatomy")
    a = await store.add_file(subject["id"], "a.txt", "A")

    with pytest.raises(ResourceNotFoundError) as exc_info:
        await store.delete_file(subject["id"], "ghost")
    assert exc_info.value.resource_type == "File"
    assert (await store.get_subject(subject["id"]))["files"] == [a]


async def test_update_with_duplicate_ids_writes_nothing(store):
    subject = await store.create_subject("Anatomy")
    with pytest.raises(SubjectValidationError):
        await store.update_subject(subject["id"], "Renamed", [
            {"id": "x", "name": "1", "content": "1"},
            {"id": "x", "name": "2", "content": "2"},
        ])
    assert (await store.get_subject(subject["id"]))["name"] == "Anatomy"


async def test_delete_subject_reports_existence(store):
    subject = await store.create_subject("Anatomy")
    assert await store.delete_subject(subject["id"]) is True
    assert await store.delete_subject(subject["id"]) is False
    assert await store.list_subjects() == []


async def test_uses_injected_file_id_factory(test_db):
    store = SubjectStore(
        test_db, owner_id="owner-a", make_file_id=lambda taken: f"f{len(list(taken))}",
    )
    subject = await store.create_subject("Anatomy")
    first = await store.add_file(subject["id"], "a.txt", "A")
    second = await store.add_file(subject["id"], "b.txt", "B")
    assert [first["id"], second["id"]] == ["f0", "f1"]


async def test_seed_if_empty_creates_samples_once(store):
    created = await store.seed_if_empty(SAMPLE_SUBJECTS)
    assert created == len(SAMPLE_SUBJECTS)

    subjects = await store.list_subjects()
    assert [s["name"] for s in subjects] == ["Anatomy"]
    files = subjects[0]["files"]
    assert [f["name"] for f in files] == [
        "Cranial Nerves.txt", "Muscles of Mastication.txt",
    ]
    assert all(f["id"] for f in files)

    assert await store.seed_if_empty(SAMPLE_SUBJECTS) == 0
    assert len(await store.list_subjects()) == 1


async def test_seed_skipped_when_owner_has_subjects(store):
    await store.create_subject("Existing")
    assert await store.seed_if_empty(SAMPLE_SUBJECTS) == 0


# ─── Optimistic locking ──────────────────────────────────────────


async def test_conflict_is_retried_on_fresh_data(store, test_db, monkeypatch):
    subject = await store.create_subject("Anatomy")
    real_commit = test_db.commit
    calls = {"n": 0}

    async def flaky_commit():
        calls["n"] += 1
        if calls["n"] == 1:
            raise StaleDataError("simulated concurrent update")
        await real_commit()

    monkeypatch.setattr(test_db, "commit", flaky_commit)
    new_file = await store.add_file(subject["id"], "a.txt", "A")

    assert calls["n"] == 2
    assert (await store.get_subject(subject["id"]))["files"] == [new_file]


async def test_conflict_retries_exhausted_raise_409(store, test_db, monkeypatch):
    subject = await store.create_subject("Anatomy")

    async def always_stale():
        raise StaleDataError("simulated concurrent update")

    monkeypatch.setattr(test_db, "commit", always_stale)
    with pytest.raises(ConcurrencyError) as exc_info:
        await store.add_file(subject["id"], "a.txt", "A")
    assert exc_info.value.http_status == 409
    assert exc_info.value.context.attempts == 3

    monkeypatch.undo()
    assert (await store.get_subject(subject["id"]))["files"] == []
