"""Service fixtures: SubjectStore bound to the per-test database."""

import pytest

from dentalect.services.subject_store import SubjectStore


@pytest.fixture
def store(test_db):
    return SubjectStore(test_db, owner_id="owner-a", max_attempts=3)
