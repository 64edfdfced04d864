import datetime
import itertools
import httpx
import pytest

from app.config import Settings
from app.services.stats.local_backend import LocalBackend
from app.services.stats.remote_backend import RemoteBackend
from app.services.stats.snapshot_cache import SnapshotCacheStore
from database.connection import create_file_engine
from database.seeders import SAMPLE_PLAYERS, SAMPLE_SERVER, build_snapshot_bytes, seed_snapshot_file

LAST_UPDATE = datetime.datetime(2026, 10, 19, 8, 0, tzinfo=datetime.timezone.utc)


class SnapshotServer:
    """Serves snapshot bytes through httpx.MockTransport and counts downloads."""

    def __init__(self, snapshot: bytes):
        self.snapshot = snapshot
        self.status_code = 200
        self.error = None
        self.requests = []
        self.transport = httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, content=self.snapshot)


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        snapshot_base_url="http://stats.test",
        snapshot_cache_path=str(tmp_path / "cache" / "snapshot_cache.db"),
        snapshot_fetch_timeout=5.0,
        executor_workers=2,
    )


@pytest.fixture()
def sample_snapshot():
    return build_snapshot_bytes(SAMPLE_PLAYERS, SAMPLE_SERVER, last_update=LAST_UPDATE)


@pytest.fixture()
def snapshot_server(sample_snapshot):
    return SnapshotServer(sample_snapshot)


@pytest.fixture()
def cache_store(settings):
    store = SnapshotCacheStore(settings.snapshot_cache_path)
    yield store
    store.close()


@pytest.fixture()
def make_backend(settings, tmp_path):
    """
    Factory building a local or remote backend over the same player data.
    Local serves a snapshot over a mock transport; remote queries a seeded SQLite file.
    """
    created = []
    counter = itertools.count()

    def _make(kind, players=SAMPLE_PLAYERS, server=SAMPLE_SERVER, **seed_kwargs):
        seed_kwargs.setdefault("last_update", LAST_UPDATE)
        n = next(counter)
        if kind == "local":
            snapshot = build_snapshot_bytes(players, server, **seed_kwargs)
            store = SnapshotCacheStore(str(tmp_path / f"cache-{n}.db"))
            backend = LocalBackend(settings, cache_store=store, transport=SnapshotServer(snapshot).transport)
        else:
            path = str(tmp_path / f"remote-{n}.db")
            seed_snapshot_file(path, players, server, **seed_kwargs)
            backend = RemoteBackend(settings, engine=create_file_engine(path))
        created.append(backend)
        return backend

    yield _make
    for backend in created:
        backend.close()


@pytest.fixture(params=["local", "remote"])
def backend_kind(request):
    return request.param
