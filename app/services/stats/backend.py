"""
Common interface of the statistics backends.

Both backends answer the same seven operations through StatsRepository; a
subclass only decides how a Session is obtained (`_query`). Every failure is
turned into a failed result here, at the operation boundary.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Callable, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from app.config import Settings
from app.schemas import (
    HallOfFameResult,
    LeaderboardResult,
    PlayerListResult,
    PlayerResult,
    QueryResult,
    ServerMetadataResult,
    ServerStatsResult,
)
from app.services.stats.errors import NotFound, QueryFailed, StatsError
from app.services.stats.queries import StatsRepository

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=QueryResult)
QueryFn = Callable[[StatsRepository], object]


def describe_db_error(e: SQLAlchemyError) -> str:
    """Driver message without SQLAlchemy's statement dump."""
    orig = getattr(e, "orig", None)
    return str(orig) if orig is not None else str(e).split("\n")[0]


class StatsBackend(ABC):
    name = "backend"

    def __init__(self, settings: Settings, executor: Optional[ThreadPoolExecutor] = None):
        self.settings = settings
        self._owns_executor = executor is None
        self.executor = executor or ThreadPoolExecutor(
            max_workers=settings.executor_workers, thread_name_prefix=f"stats-{self.name}"
        )

    async def _in_executor(self, fn, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, partial(fn, *args))

    @abstractmethod
    async def _query(self, fn: QueryFn):
        """Runs fn against a repository bound to this backend's data."""

    async def _run(self, result_cls: Type[R], operation: str, fn: QueryFn) -> R:
        try:
            payload = await self._query(fn)
        except NotFound as e:
            logger.info(f"{operation}: {e.message}")
            return result_cls(success=False, error=e.message, error_kind=e.kind)
        except StatsError as e:
            logger.error(f"ERROR ({operation}): {e.message}")
            return result_cls(success=False, error=e.message, error_kind=e.kind)
        except Exception as e:
            logger.exception(f"ERROR ({operation}): {e}")
            return result_cls(success=False, error=str(e) or type(e).__name__, error_kind=QueryFailed.kind)

        return result_cls(success=True, **{result_cls.payload_field: payload})

    # --- Operations ---

    async def list_players(self) -> PlayerListResult:
        return await self._run(PlayerListResult, "list_players", lambda repo: repo.list_players())

    async def get_player_by_uuid(self, uuid: str) -> PlayerResult:
        return await self._run(PlayerResult, "get_player_by_uuid", lambda repo: repo.get_player_by_uuid(uuid))

    async def get_player_by_id(self, player_id: int) -> PlayerResult:
        return await self._run(PlayerResult, "get_player_by_id", lambda repo: repo.get_player_by_id(player_id))

    async def get_hall_of_fame(self) -> HallOfFameResult:
        return await self._run(HallOfFameResult, "get_hall_of_fame", lambda repo: repo.get_hall_of_fame())

    async def get_server_metadata(self) -> ServerMetadataResult:
        return await self._run(ServerMetadataResult, "get_server_metadata", lambda repo: repo.get_server_metadata())

    async def get_server_stats(self) -> ServerStatsResult:
        return await self._run(ServerStatsResult, "get_server_stats", lambda repo: repo.get_server_stats())

    async def get_stat_leaderboard(self, category: str, stat_name: str) -> LeaderboardResult:
        return await self._run(
            LeaderboardResult,
            "get_stat_leaderboard",
            lambda repo: repo.get_stat_leaderboard(category, stat_name),
        )

    def close(self):
        if self._owns_executor:
            self.executor.shutdown(wait=True)
