# Export Base for schema creation
from .base import Base, CacheBase

# Statistics schema
from .players.player import Player
from .players.hall_of_fame import HallOfFame
from .players.player_stat import StatMixin, STAT_CATEGORIES, STAT_TABLES
from .sync_metadata import SyncMetadata

# Local cache store
from .cache_entry import CachedSnapshot
