import pytest
from sqlalchemy import text
from database.connection import (
    SQLITE_HEADER,
    SnapshotLoadError,
    create_snapshot_engine,
    export_snapshot,
)


def _player_count(engine):
    with engine.connect() as conn:
        return conn.execute(text("SELECT COUNT(*) FROM uuid_map")).scalar()


def test_engine_loads_snapshot(sample_snapshot):
    engine = create_snapshot_engine(sample_snapshot)
    try:
        assert _player_count(engine) == 3
    finally:
        engine.dispose()


def test_export_is_loadable_snapshot(sample_snapshot):
    engine = create_snapshot_engine(sample_snapshot)
    try:
        exported = export_snapshot(engine)
    finally:
        engine.dispose()

    assert exported[:16] == SQLITE_HEADER
    reloaded = create_snapshot_engine(exported)
    try:
        assert _player_count(reloaded) == 3
    finally:
        reloaded.dispose()


def test_engines_do_not_share_state(sample_snapshot):
    first = create_snapshot_engine(sample_snapshot)
    second = create_snapshot_engine(sample_snapshot)
    try:
        with first.begin() as conn:
            conn.execute(text("DELETE FROM uuid_map"))
        assert _player_count(first) == 0
        assert _player_count(second) == 3
    finally:
        first.dispose()
        second.dispose()


@pytest.mark.parametrize("payload", [b"", b"<html>404</html>", b"SQLite format 3\x00" + b"\xff" * 4080])
def test_invalid_snapshot_rejected(payload):
    with pytest.raises(SnapshotLoadError):
        create_snapshot_engine(payload)
