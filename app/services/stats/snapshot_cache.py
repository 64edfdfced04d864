"""
Snapshot Cache Store

Client-local SQLite file holding exactly one downloaded snapshot and the time
it was written. A failing or disabled store never breaks a request: reads
report "absent" and the caller downloads a fresh snapshot instead.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.services.stats.errors import CacheWriteFailure
from database.connection import create_file_engine
from database.models import CacheBase, CachedSnapshot

logger = logging.getLogger(__name__)

CACHE_KEY = "cachedDatabase"


@dataclass(frozen=True)
class CacheEntry:
    snapshot: bytes
    timestamp: int  # epoch milliseconds


class SnapshotCacheStore:
    def __init__(self, path: str, enabled: bool = True, engine: Optional[Engine] = None):
        self.path = path
        self.enabled = enabled
        self._engine = engine
        self._session_factory = None
        self._lock = threading.Lock()

    def _sessions(self) -> sessionmaker:
        """Opens the store and creates its table on first use."""
        with self._lock:
            if self._session_factory is None:
                engine = self._engine or create_file_engine(self.path)
                CacheBase.metadata.create_all(bind=engine, checkfirst=True)
                self._engine = engine
                self._session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
                logger.info(f"Snapshot cache store ready: {self.path}")
            return self._session_factory

    def get(self) -> Optional[CacheEntry]:
        if not self.enabled:
            return None

        try:
            with self._sessions()() as db:
                row = db.get(CachedSnapshot, CACHE_KEY)
                if row is None:
                    logger.info("No snapshot found in cache store.")
                    return None
                return CacheEntry(snapshot=bytes(row.db), timestamp=int(row.timestamp))
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Snapshot cache store unavailable, treating as empty: {e}")
            return None

    def put(self, blob: bytes, now: int) -> CacheEntry:
        """
        Replaces the cached snapshot in a single transaction.
        Raises CacheWriteFailure; the previous entry stays readable on failure.
        """
        if not self.enabled:
            raise CacheWriteFailure("Snapshot cache store is disabled")

        try:
            with self._sessions()() as db:
                with db.begin():
                    row = db.get(CachedSnapshot, CACHE_KEY)
                    if row is None:
                        row = CachedSnapshot(key=CACHE_KEY, db=bytes(blob), timestamp=now)
                        db.add(row)
                    else:
                        row.db = bytes(blob)
                        # Timestamps never move backwards, even if the clock does
                        row.timestamp = max(int(row.timestamp), now)
                entry = CacheEntry(snapshot=bytes(row.db), timestamp=int(row.timestamp))
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Error saving snapshot to cache store: {e}")
            raise CacheWriteFailure(f"Could not save snapshot: {e}") from e

        logger.info(f"Snapshot and timestamp saved ({len(entry.snapshot)} bytes).")
        return entry

    def clear(self) -> bool:
        if not self.enabled:
            return False

        try:
            with self._sessions()() as db:
                with db.begin():
                    row = db.get(CachedSnapshot, CACHE_KEY)
                    if row is None:
                        return False
                    db.delete(row)
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Error clearing snapshot cache: {e}")
            return False

    def close(self):
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
            self._session_factory = None
