import os
import sqlite3
import logging
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import URL
from sqlalchemy.pool import QueuePool, StaticPool

from app.config import Settings

logger = logging.getLogger("database.connection")

SQLITE_HEADER = b"SQLite format 3\x00"


class SnapshotLoadError(Exception):
    """Raised when snapshot bytes cannot be turned into a query engine."""


def get_connection_url(settings: Settings):
    """
    Synthesizes the remote database URL from the configured parameters.
    """
    driver_map = {
        'mysql': 'mysql+pymysql',
    }
    driver = driver_map.get(settings.db_engine, settings.db_engine)

    return URL.create(
        drivername=driver,
        username=settings.db_user,
        password=settings.db_password,
        host=settings.db_host,
        port=settings.db_port,
        database=settings.db_schema
    )


def create_remote_engine(settings: Settings) -> Engine:
    """
    Configures the pooled SQLAlchemy Engine for the remote statistics store.
    Connections are checked out per logical query and returned afterwards.
    """
    url = get_connection_url(settings)

    kwargs = {
        'echo': settings.db_echo,
        'poolclass': QueuePool,
        'pool_size': settings.db_pool_size,
        'max_overflow': settings.db_max_overflow,
        'pool_timeout': settings.db_pool_timeout,
        # Handle connection timeouts
        'pool_recycle': 3600,
        'pool_pre_ping': True,
    }

    if url.drivername.startswith("mysql"):
        kwargs['connect_args'] = {'connect_timeout': settings.db_connect_timeout}

    logger.info(f"Remote statistics store: {url.render_as_string(hide_password=True)}")
    return create_engine(url, **kwargs)


def ensure_engine_support():
    """
    The in-memory engine needs sqlite3 serialize/deserialize (Python 3.11+).
    """
    if not hasattr(sqlite3.Connection, "deserialize") or not hasattr(sqlite3.Connection, "serialize"):
        raise SnapshotLoadError(
            f"SQLite runtime {sqlite3.sqlite_version} cannot load in-memory snapshots"
        )


def create_snapshot_engine(snapshot: bytes) -> Engine:
    """
    Builds a private in-memory SQLite engine holding a copy of the snapshot.

    Every call returns an independent database; nothing is shared with other
    engines built from the same bytes.
    """
    ensure_engine_support()

    if not snapshot or not bytes(snapshot[:16]) == SQLITE_HEADER:
        raise SnapshotLoadError("Snapshot is not a SQLite database")

    dbapi_connection = sqlite3.connect(":memory:", check_same_thread=False)
    try:
        dbapi_connection.deserialize(bytes(snapshot))
        # Force a schema read so truncated files fail here, not mid-query
        dbapi_connection.execute("SELECT count(*) FROM sqlite_master").fetchone()
    except sqlite3.DatabaseError as e:
        dbapi_connection.close()
        raise SnapshotLoadError(f"Snapshot could not be parsed: {e}") from e

    engine = create_engine(
        "sqlite://",
        creator=lambda: dbapi_connection,
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "engine_disposed")
    def close_snapshot(disposed_engine):
        dbapi_connection.close()

    return engine


def export_snapshot(engine: Engine) -> bytes:
    """Returns the canonical serialized form of an in-memory snapshot engine."""
    with engine.connect() as connection:
        dbapi_connection = connection.connection.dbapi_connection
        return bytes(dbapi_connection.serialize())


def create_file_engine(path: str) -> Engine:
    """
    SQLite file engine, used for the snapshot cache store and fixture files.
    Handles the directory creation.
    """
    directory = os.path.dirname(os.path.abspath(path))
    if not os.path.exists(directory):
        os.makedirs(directory, exist_ok=True)
        logger.info(f"Created SQLite instance directory: {directory}")

    engine = create_engine(
        f"sqlite:///{os.path.abspath(path)}",
        connect_args={'check_same_thread': False, 'timeout': 60},
    )

    # Force Disable WAL mode for SQLite (OneDrive Compatibility)
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=DELETE")
        cursor.close()

    return engine
