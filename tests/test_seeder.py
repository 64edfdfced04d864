import asyncio
from sqlalchemy import inspect

import app.config
from app.config import Settings
from app.services.stats.remote_backend import RemoteBackend
from database.connection import create_file_engine
from database.models import Base
from database.seeder import create_statistics_schema, run_snapshot_seeder


def _tables(path):
    engine = create_file_engine(path)
    try:
        return set(inspect(engine).get_table_names())
    finally:
        engine.dispose()


def test_schema_created_in_target_file(tmp_path):
    target = str(tmp_path / "stats" / "schema.db")
    assert create_statistics_schema(target) is True
    assert _tables(target) == set(Base.metadata.tables)


def test_schema_is_idempotent_and_keeps_data(tmp_path, settings):
    target = str(tmp_path / "seeded.db")
    assert run_snapshot_seeder(target) is True
    assert create_statistics_schema(target) is True

    backend = RemoteBackend(settings, engine=create_file_engine(target))
    try:
        result = asyncio.run(backend.list_players())
    finally:
        backend.close()
    assert [p.nick for p in result.players] == ["Notch", "jeb_", "Dinnerbone"]


def test_schema_on_configured_remote_database(tmp_path, monkeypatch):
    target = tmp_path / "remote.db"
    remote = Settings(use_remote_db=True, db_engine="sqlite", db_schema=str(target))
    monkeypatch.setattr(app.config, "_settings", remote)

    assert create_statistics_schema() is True
    assert "uuid_map" in _tables(str(target))


def test_schema_failure_is_reported(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("occupied")
    assert create_statistics_schema(str(blocker / "stats.db")) is False


def test_seeder_does_not_overwrite(tmp_path):
    target = str(tmp_path / "seeded.db")
    assert run_snapshot_seeder(target) is True
    assert run_snapshot_seeder(target) is False
    assert run_snapshot_seeder(target, overwrite=True) is True
