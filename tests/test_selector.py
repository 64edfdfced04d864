import asyncio
import pytest

import app.config
import app.services.stats.selector as selector
from app.config import Settings
from app.schemas import HallOfFameResult, LeaderboardResult, PlayerResult
from app.services.stats.local_backend import LocalBackend
from app.services.stats.remote_backend import RemoteBackend
from app.services.stats.selector import StatsService, create_backend


class FakeBackend:
    name = "fake"

    def __init__(self):
        self.calls = []
        self.closed = False

    async def get_player_by_id(self, player_id):
        self.calls.append(("get_player_by_id", player_id))
        return PlayerResult(success=False, error="Player not found", error_kind="not_found")

    async def get_hall_of_fame(self):
        self.calls.append(("get_hall_of_fame",))
        return HallOfFameResult(success=True, data=[])

    async def get_stat_leaderboard(self, category, stat_name):
        self.calls.append(("get_stat_leaderboard", category, stat_name))
        return LeaderboardResult(success=True, data=[])

    def close(self):
        self.closed = True


def test_local_backend_by_default(settings):
    backend = create_backend(settings)
    try:
        assert isinstance(backend, LocalBackend)
    finally:
        backend.close()


def test_remote_backend_when_enabled(tmp_path):
    # The pooled engine is lazy, nothing connects until the first query
    settings = Settings(use_remote_db=True, db_engine="sqlite", db_schema=str(tmp_path / "stats.db"))
    backend = create_backend(settings)
    try:
        assert isinstance(backend, RemoteBackend)
    finally:
        backend.close()


def test_service_forwards_to_backend():
    backend = FakeBackend()
    service = StatsService(backend)

    async def calls():
        return (
            await service.get_player_by_id(7),
            await service.get_hall_of_fame(),
            await service.get_stat_leaderboard("mined", "stone"),
        )

    player, hof, board = asyncio.run(calls())

    assert service.backend_name == "fake"
    assert player.error_kind == "not_found"
    assert hof.success and board.success
    assert backend.calls == [
        ("get_player_by_id", 7),
        ("get_hall_of_fame",),
        ("get_stat_leaderboard", "mined", "stone"),
    ]

    service.close()
    assert backend.closed


@pytest.fixture()
def fresh_singletons(monkeypatch, settings):
    monkeypatch.setattr(app.config, "_settings", settings)
    monkeypatch.setattr(selector, "_service", None)
    yield
    selector.shutdown_stats_service()


def test_service_is_created_once(fresh_singletons):
    first = selector.get_stats_service()
    second = selector.get_stats_service()
    assert first is second
    assert first.backend_name == "local"


def test_shutdown_resets_service(fresh_singletons):
    first = selector.get_stats_service()
    selector.shutdown_stats_service()
    second = selector.get_stats_service()
    assert first is not second
