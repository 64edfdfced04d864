"""
Remote Backend

Queries the MySQL schema the stats mod syncs into. Connections come from a
bounded pool; every logical call checks one out and always returns it.
"""
import logging
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.config import Settings
from app.services.stats.backend import QueryFn, StatsBackend, describe_db_error
from app.services.stats.errors import QueryFailed, SourceUnavailable
from app.services.stats.queries import StatsRepository
from database.connection import create_remote_engine

logger = logging.getLogger(__name__)


class RemoteBackend(StatsBackend):
    name = "remote"

    def __init__(self, settings: Settings, engine: Optional[Engine] = None, executor=None):
        super().__init__(settings, executor)
        self.engine = engine or create_remote_engine(settings)
        self.SessionLocal = sessionmaker(autoflush=False, bind=self.engine)

    async def _query(self, fn: QueryFn):
        return await self._in_executor(self._query_remote, fn)

    def _query_remote(self, fn: QueryFn):
        db = self.SessionLocal()
        try:
            try:
                # Check out the pooled connection up front so connect errors stay distinct
                db.connection()
            except SQLAlchemyError as e:
                raise SourceUnavailable(
                    f"Could not connect to statistics database: {describe_db_error(e)}"
                ) from e

            try:
                return fn(StatsRepository(db, self.settings))
            except SQLAlchemyError as e:
                raise QueryFailed(describe_db_error(e)) from e
        finally:
            db.close()

    def close(self):
        self.engine.dispose()
        super().close()
