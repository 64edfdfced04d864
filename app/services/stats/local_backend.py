"""
Local Backend

Serves queries from a downloaded SQLite snapshot. The snapshot is cached in
the SnapshotCacheStore for `snapshot_ttl_seconds`; older, unreadable or missing entries
are replaced by a fresh download. Each request queries its own in-memory copy.
"""
import time
import asyncio
import logging
from typing import Callable, Optional

import httpx
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import Settings
from app.services.stats.backend import QueryFn, StatsBackend, describe_db_error
from app.services.stats.errors import CacheWriteFailure, QueryFailed, SourceUnavailable
from app.services.stats.queries import StatsRepository
from app.services.stats.snapshot_cache import SnapshotCacheStore
from core.downloader import fetch_snapshot
from database.connection import SnapshotLoadError, create_snapshot_engine, export_snapshot

logger = logging.getLogger(__name__)

MS_PER_HOUR = 60 * 60 * 1000


def now_ms() -> int:
    return int(time.time() * 1000)


class LocalBackend(StatsBackend):
    name = "local"

    def __init__(
        self,
        settings: Settings,
        cache_store: Optional[SnapshotCacheStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], int] = now_ms,
        executor=None,
    ):
        super().__init__(settings, executor)
        self.cache_store = cache_store or SnapshotCacheStore(
            settings.snapshot_cache_path, enabled=settings.snapshot_cache_enabled
        )
        self.transport = transport
        self.clock = clock
        # Pending cache resolve/refresh shared by concurrent requests
        self._pending: Optional[asyncio.Future] = None

    async def _query(self, fn: QueryFn):
        snapshot = await self.load_snapshot()
        return await self._in_executor(self._query_snapshot, snapshot, fn)

    def _query_snapshot(self, snapshot: bytes, fn: QueryFn):
        engine = self._open_engine(snapshot)
        try:
            with Session(engine) as db:
                return fn(StatsRepository(db, self.settings))
        except SQLAlchemyError as e:
            raise QueryFailed(describe_db_error(e)) from e
        finally:
            engine.dispose()

    def _open_engine(self, snapshot: bytes) -> Engine:
        try:
            return create_snapshot_engine(snapshot)
        except SnapshotLoadError as e:
            raise SourceUnavailable(str(e)) from e

    # --- Snapshot resolution ---

    async def load_snapshot(self) -> bytes:
        """
        Returns current snapshot bytes, from cache when fresh, downloaded otherwise.
        Concurrent callers join the one in-flight resolution.
        """
        if self._pending is None:
            pending = asyncio.ensure_future(self._resolve_snapshot())
            pending.add_done_callback(self._resolve_done)
            self._pending = pending
        # shield: an abandoned caller does not abort the download for the others
        return await asyncio.shield(self._pending)

    def _resolve_done(self, future: asyncio.Future):
        if self._pending is future:
            self._pending = None
        if not future.cancelled():
            # Joined callers re-raise it; this only silences "never retrieved"
            future.exception()

    async def _resolve_snapshot(self) -> bytes:
        now = self.clock()
        entry = await self._in_executor(self.cache_store.get)

        if entry is not None:
            age_ms = now - entry.timestamp
            if age_ms < 0:
                # Written with a clock ahead of ours; its age is unknown
                logger.warning(f"Cached database timestamp is {-age_ms} ms in the future. Refreshing...")
            elif age_ms < self.settings.snapshot_ttl_ms:
                if await self._in_executor(self._is_loadable, entry.snapshot):
                    logger.info(f"Using cached database. Age: {age_ms / MS_PER_HOUR:.2f} hours.")
                    return entry.snapshot
                logger.warning("Cached database could not be loaded. Downloading new database...")
            else:
                logger.info(f"Cached database is too old (Age: {age_ms / MS_PER_HOUR:.2f} hours). Refreshing...")
        else:
            logger.info("No cached database found. Downloading new database...")

        return await self.refresh_snapshot(now)

    async def refresh_snapshot(self, now: Optional[int] = None) -> bytes:
        """
        Downloads the snapshot, validates it and stores its canonical form.
        A failed download is fatal; a failed cache write is not.
        """
        now = self.clock() if now is None else now
        data = await fetch_snapshot(
            self.settings.snapshot_url, self.settings.snapshot_fetch_timeout, transport=self.transport
        )
        snapshot = await self._in_executor(self._canonical_snapshot, data)

        try:
            await self._in_executor(self.cache_store.put, snapshot, now)
        except CacheWriteFailure as e:
            logger.warning(f"Serving downloaded database without caching it: {e.message}")

        return snapshot

    def _is_loadable(self, snapshot: bytes) -> bool:
        try:
            engine = create_snapshot_engine(snapshot)
        except SnapshotLoadError as e:
            logger.warning(f"Rejecting cached snapshot: {e}")
            return False
        engine.dispose()
        return True

    def _canonical_snapshot(self, data: bytes) -> bytes:
        engine = self._open_engine(data)
        try:
            return export_snapshot(engine)
        finally:
            engine.dispose()

    def close(self):
        self.cache_store.close()
        super().close()
