"""Alembic migrations: `upgrade head` builds the schema the ORM models declare."""

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from dentalect.db.base import Base
import dentalect.models  # noqa: F401

PROJECT_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def migrated_db(tmp_path, monkeypatch):
    db_path = tmp_path / "migrated.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")
    cfg = Config()
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    command.upgrade(cfg, "head")
    engine = create_engine(f"sqlite:///{db_path}")
    yield cfg, engine
    engine.dispose()


def test_upgrade_matches_model_metadata(migrated_db):
    _, engine = migrated_db
    inspector = inspect(engine)
    model_table = Base.metadata.tables["subjects"]

    assert {c["name"] for c in inspector.get_columns("subjects")} == {
        c.name for c in model_table.columns
    }
    assert inspector.get_pk_constraint("subjects")["constrained_columns"] == ["seq"]
    indexes = {
        i["name"]: (i["column_names"], bool(i["unique"]))
        for i in inspector.get_indexes("subjects")
    }
    assert indexes == {
        i.name: ([c.name for c in i.columns], bool(i.unique))
        for i in model_table.indexes
    }


def test_downgrade_drops_subjects(migrated_db):
    cfg, engine = migrated_db
    command.downgrade(cfg, "base")
    assert "subjects" not in inspect(engine).get_table_names()
