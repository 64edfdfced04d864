from pydantic import BaseModel, ConfigDict
from typing import ClassVar, Dict, List, Optional
from datetime import datetime

# --- Domain objects ---

class PlayerInfo(BaseModel):
    id: int
    uuid: str
    nick: Optional[str]
    last_online: Optional[datetime]

class StatEntry(BaseModel):
    name: str
    value: int
    position: Optional[int]

class PlayerDetail(BaseModel):
    id: int
    uuid: str
    nick: Optional[str]
    last_online: Optional[datetime]
    hof: int = 0
    # Category -> entries. Categories without rows are left out, not sent empty.
    stats: Dict[str, List[StatEntry]] = {}

class HallOfFameEntry(BaseModel):
    id: int
    uuid: str
    nick: Optional[str]
    score: int

class ServerMetadata(BaseModel):
    last_update: Optional[datetime]
    desc: str
    url: str
    icon: str  # data: URI or placeholder asset path

class ServerTotals(BaseModel):
    player_count: int = 0
    total_play_time: int = 0
    total_damage_dealt: int = 0
    total_travelled_distance: int = 0
    total_broken_tools: int = 0
    total_crafted_items: int = 0
    total_mined_blocks: int = 0
    total_killed_mobs: int = 0
    total_dropped_items: int = 0
    total_pickedup_items: int = 0

class AggregateStats(BaseModel):
    server_name: str
    server_url: str
    stats: ServerTotals

class LeaderboardRow(BaseModel):
    rank: Optional[int]
    player_id: int
    player_uuid: str
    player_nick: Optional[str]
    score: int

# --- Operation results ---

class QueryResult(BaseModel):
    """
    Uniform result of every statistics operation.
    Callers check `success` before reading the payload field.
    """
    model_config = ConfigDict(frozen=True)

    payload_field: ClassVar[str] = "data"

    success: bool
    error: Optional[str] = None
    error_kind: Optional[str] = None  # not_found, source_unavailable, query_failed

    @property
    def payload(self):
        return getattr(self, self.payload_field)

class PlayerListResult(QueryResult):
    payload_field: ClassVar[str] = "players"
    players: Optional[List[PlayerInfo]] = None

class PlayerResult(QueryResult):
    payload_field: ClassVar[str] = "player"
    player: Optional[PlayerDetail] = None

class HallOfFameResult(QueryResult):
    data: Optional[List[HallOfFameEntry]] = None

class ServerMetadataResult(QueryResult):
    data: Optional[ServerMetadata] = None

class ServerStatsResult(QueryResult):
    data: Optional[AggregateStats] = None

class LeaderboardResult(QueryResult):
    data: Optional[List[LeaderboardRow]] = None
