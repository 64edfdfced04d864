import os
import logging
from typing import Optional
from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_SERVER_DESC = "§cPowered by§r\n§a§lPlayer statistics §7§8(no motd found)"
DEFAULT_SERVER_URL = "https://modrinth.com/mod/player-statistics"
DEFAULT_SERVER_ICON = "/assets/server_missing_img.webp"


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


def _default_cache_path() -> str:
    # /project/database/instance/ next to the other SQLite files
    project_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(project_dir, "database", "instance", "player_statistics_cache.db")


class Settings(BaseModel):
    # Backend switch, resolved once at startup
    use_remote_db: bool = False

    # Local backend: snapshot download + cache
    snapshot_base_url: str = "http://localhost:3000"
    snapshot_path: str = "/player-statistics.db"
    snapshot_ttl_seconds: int = 3600
    snapshot_fetch_timeout: float = 30.0
    snapshot_cache_enabled: bool = True
    snapshot_cache_path: str = Field(default_factory=_default_cache_path)

    # Remote backend: MySQL connection
    db_engine: str = "mysql"
    db_host: Optional[str] = None
    db_port: Optional[int] = None
    db_user: Optional[str] = None
    db_password: Optional[str] = None
    db_schema: Optional[str] = None
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: float = 30.0
    db_connect_timeout: int = 10
    db_echo: bool = False

    # Fallbacks for missing sync_metadata fields
    default_server_desc: str = DEFAULT_SERVER_DESC
    default_server_url: str = DEFAULT_SERVER_URL
    default_server_icon: str = DEFAULT_SERVER_ICON

    # Thread pool for blocking SQLite/MySQL work
    executor_workers: int = 4

    @property
    def snapshot_url(self) -> str:
        return f"{self.snapshot_base_url.rstrip('/')}/{self.snapshot_path.lstrip('/')}"

    @property
    def snapshot_ttl_ms(self) -> int:
        return self.snapshot_ttl_seconds * 1000

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Reads the process environment (and .env) into a Settings instance.
        Variable names follow the ones used by the web frontend deployment.
        """
        return cls(
            use_remote_db=_env_bool("USE_REMOTE_DB"),
            snapshot_base_url=os.getenv("SNAPSHOT_BASE_URL", "http://localhost:3000"),
            snapshot_path=os.getenv("SNAPSHOT_PATH", "/player-statistics.db"),
            snapshot_ttl_seconds=_env_int("SNAPSHOT_TTL_SECONDS", 3600),
            snapshot_fetch_timeout=_env_float("SNAPSHOT_FETCH_TIMEOUT", 30.0),
            snapshot_cache_enabled=_env_bool("SNAPSHOT_CACHE_ENABLED", "true"),
            snapshot_cache_path=os.getenv("SNAPSHOT_CACHE_PATH") or _default_cache_path(),
            db_engine=os.getenv("DB_ENGINE", "mysql").lower(),
            db_host=os.getenv("DB_URL") or os.getenv("DB_HOST"),
            db_port=int(os.getenv("DB_PORT")) if os.getenv("DB_PORT") else None,
            db_user=os.getenv("DB_USER"),
            db_password=os.getenv("DB_PASS") or os.getenv("DB_PASSWORD"),
            db_schema=os.getenv("DB_SCHEMA") or os.getenv("DB_NAME"),
            db_pool_size=_env_int("DB_POOL_SIZE", 5),
            db_max_overflow=_env_int("DB_MAX_OVERFLOW", 10),
            db_pool_timeout=_env_float("DB_POOL_TIMEOUT", 30.0),
            db_connect_timeout=_env_int("DB_CONNECT_TIMEOUT", 10),
            db_echo=_env_bool("DB_ECHO"),
            default_server_desc=os.getenv("DEFAULT_SERVER_DESC", DEFAULT_SERVER_DESC),
            default_server_url=os.getenv("DEFAULT_SERVER_URL", DEFAULT_SERVER_URL),
            default_server_icon=os.getenv("DEFAULT_SERVER_ICON", DEFAULT_SERVER_ICON),
            executor_workers=_env_int("STATS_EXECUTOR_WORKERS", 4),
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Process-wide settings, read once on first use."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
        logger.info(f"Statistics backend: {'remote' if _settings.use_remote_db else 'local snapshot'}")
    return _settings
