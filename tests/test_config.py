import datetime
import pytest

from app.config import DEFAULT_SERVER_ICON, Settings
from database.connection import get_connection_url
from database.models.types import to_datetime, to_epoch_millis

ENV_VARS = (
    "USE_REMOTE_DB", "SNAPSHOT_BASE_URL", "SNAPSHOT_PATH", "SNAPSHOT_TTL_SECONDS",
    "SNAPSHOT_CACHE_PATH", "DB_ENGINE", "DB_URL", "DB_HOST", "DB_PORT", "DB_USER",
    "DB_PASS", "DB_PASSWORD", "DB_SCHEMA", "DB_NAME", "DB_POOL_SIZE", "DEFAULT_SERVER_ICON",
)


@pytest.fixture()
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = Settings.from_env()
    assert settings.use_remote_db is False
    assert settings.snapshot_ttl_ms == 3_600_000
    assert settings.snapshot_url == "http://localhost:3000/player-statistics.db"
    assert settings.snapshot_cache_path.endswith("player_statistics_cache.db")
    assert settings.default_server_icon == DEFAULT_SERVER_ICON


def test_remote_settings_from_env(clean_env):
    clean_env.setenv("USE_REMOTE_DB", "true")
    clean_env.setenv("DB_URL", "db.internal")
    clean_env.setenv("DB_PORT", "3307")
    clean_env.setenv("DB_USER", "stats")
    clean_env.setenv("DB_PASS", "s3cret")
    clean_env.setenv("DB_SCHEMA", "player_stats")
    clean_env.setenv("DB_POOL_SIZE", "8")

    settings = Settings.from_env()
    url = get_connection_url(settings)

    assert settings.use_remote_db is True
    assert settings.db_pool_size == 8
    assert url.drivername == "mysql+pymysql"
    assert (url.host, url.port, url.database) == ("db.internal", 3307, "player_stats")
    assert "s3cret" not in url.render_as_string(hide_password=True)


@pytest.mark.parametrize("base, path", [
    ("https://stats.example.org", "/player-statistics.db"),
    ("https://stats.example.org/", "player-statistics.db"),
    ("https://stats.example.org/", "/player-statistics.db"),
])
def test_snapshot_url_joining(base, path):
    settings = Settings(snapshot_base_url=base, snapshot_path=path)
    assert settings.snapshot_url == "https://stats.example.org/player-statistics.db"


def test_timestamps_read_in_any_stored_form():
    expected = datetime.datetime(2026, 10, 19, 8, 0, tzinfo=datetime.timezone.utc)
    millis = to_epoch_millis(expected)

    assert to_datetime(millis) == expected
    assert to_datetime(str(millis)) == expected
    assert to_datetime("2026-10-19T08:00:00Z") == expected
    assert to_datetime(datetime.datetime(2026, 10, 19, 8, 0)) == expected
    assert to_datetime(None) is None
    assert to_datetime("") is None


def test_direct_settings_use_default_cache_path():
    settings = Settings()
    assert settings.snapshot_cache_path.endswith("player_statistics_cache.db")
    assert settings.snapshot_cache_path != ""
