"""
Backend selection.

The backend is picked once from configuration and injected into
StatsService; callers only ever talk to StatsService.
"""
import logging
from typing import Optional

from app.config import Settings, get_settings
from app.schemas import (
    HallOfFameResult,
    LeaderboardResult,
    PlayerListResult,
    PlayerResult,
    ServerMetadataResult,
    ServerStatsResult,
)
from app.services.stats.backend import StatsBackend
from app.services.stats.local_backend import LocalBackend
from app.services.stats.remote_backend import RemoteBackend

logger = logging.getLogger(__name__)


def create_backend(settings: Settings) -> StatsBackend:
    if settings.use_remote_db:
        return RemoteBackend(settings)
    return LocalBackend(settings)


class StatsService:
    """Uniform async interface over whichever backend is active."""

    def __init__(self, backend: StatsBackend):
        self.backend = backend

    @property
    def backend_name(self) -> str:
        return self.backend.name

    async def list_players(self) -> PlayerListResult:
        return await self.backend.list_players()

    async def get_player_by_uuid(self, uuid: str) -> PlayerResult:
        return await self.backend.get_player_by_uuid(uuid)

    async def get_player_by_id(self, player_id: int) -> PlayerResult:
        return await self.backend.get_player_by_id(player_id)

    async def get_hall_of_fame(self) -> HallOfFameResult:
        return await self.backend.get_hall_of_fame()

    async def get_server_metadata(self) -> ServerMetadataResult:
        return await self.backend.get_server_metadata()

    async def get_server_stats(self) -> ServerStatsResult:
        return await self.backend.get_server_stats()

    async def get_stat_leaderboard(self, category: str, stat_name: str) -> LeaderboardResult:
        return await self.backend.get_stat_leaderboard(category, stat_name)

    def close(self):
        self.backend.close()


_service: Optional[StatsService] = None


def get_stats_service() -> StatsService:
    """Process-wide service; the backend choice is fixed on first call."""
    global _service
    if _service is None:
        settings = get_settings()
        _service = StatsService(create_backend(settings))
        logger.info(f"Statistics service using {_service.backend_name} backend")
    return _service


def shutdown_stats_service():
    global _service
    if _service is not None:
        _service.close()
        _service = None
