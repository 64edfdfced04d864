import asyncio
from sqlalchemy import create_engine

from app.services.stats.remote_backend import RemoteBackend
from database.connection import create_file_engine


def test_queries_seeded_store(make_backend):
    backend = make_backend("remote")
    result = asyncio.run(backend.list_players())
    assert result.success
    assert [p.nick for p in result.players] == ["Notch", "jeb_", "Dinnerbone"]
    assert backend.engine.pool.checkedout() == 0


def test_unknown_player_releases_connection(make_backend):
    backend = make_backend("remote")
    result = asyncio.run(backend.get_player_by_uuid("00000000-0000-0000-0000-000000000000"))
    assert not result.success
    assert result.error_kind == "not_found"
    assert result.error == "Player not found"
    assert result.player is None
    assert backend.engine.pool.checkedout() == 0


def test_connection_failure_is_source_unavailable(settings, tmp_path):
    missing = tmp_path / "no" / "such" / "dir" / "stats.db"
    backend = RemoteBackend(settings, engine=create_engine(f"sqlite:///{missing}"))
    try:
        result = asyncio.run(backend.get_hall_of_fame())
    finally:
        backend.close()

    assert not result.success
    assert result.error_kind == "source_unavailable"
    assert result.data is None


def test_statement_error_is_query_failed(settings, tmp_path):
    # Reachable database without the statistics tables
    engine = create_file_engine(str(tmp_path / "empty.db"))
    backend = RemoteBackend(settings, engine=engine)
    try:
        result = asyncio.run(backend.list_players())
        assert not result.success
        assert result.error_kind == "query_failed"
        assert "uuid_map" in result.error
        assert engine.pool.checkedout() == 0
    finally:
        backend.close()


def test_parallel_calls_share_bounded_pool(make_backend):
    backend = make_backend("remote")

    async def burst():
        return await asyncio.gather(*(backend.get_player_by_id(i) for i in (1, 2, 3, 1, 2, 3)))

    results = asyncio.run(burst())
    assert [r.player.id for r in results] == [1, 2, 3, 1, 2, 3]
    assert backend.engine.pool.checkedout() == 0
