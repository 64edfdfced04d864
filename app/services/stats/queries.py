"""
Statistics queries shared by both backends.

The snapshot file and the remote schema have the same tables, so one set of
ORM statements serves both; the backends only differ in how they hand over a
Session. Keeping the mapping here is what makes the two result shapes equal.
"""
import base64
import logging
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.config import Settings
from app.schemas import (
    AggregateStats,
    HallOfFameEntry,
    LeaderboardRow,
    PlayerDetail,
    PlayerInfo,
    ServerMetadata,
    ServerTotals,
    StatEntry,
)
from app.services.stats.errors import NotFound, QueryFailed
from database.models import HallOfFame, Player, STAT_TABLES, SyncMetadata

logger = logging.getLogger(__name__)

HALL_OF_FAME_SIZE = 15

# custom/* stats summed into total_travelled_distance (centimetres)
DISTANCE_STATS = (
    "climb_one_cm",
    "crouch_one_cm",
    "fall_one_cm",
    "fly_one_cm",
    "sprint_one_cm",
    "swim_one_cm",
    "walk_one_cm",
    "walk_on_water_one_cm",
    "walk_under_water_one_cm",
    "boat_one_cm",
    "aviate_one_cm",
    "horse_one_cm",
    "minecart_one_cm",
    "pig_one_cm",
    "strider_one_cm",
)


def encode_icon(icon: Optional[bytes], placeholder: str) -> str:
    if not icon:
        return placeholder
    return f"data:image/png;base64,{base64.b64encode(bytes(icon)).decode('ascii')}"


class StatsRepository:
    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    # --- Players ---

    def list_players(self) -> List[PlayerInfo]:
        players = self.db.scalars(select(Player).order_by(Player.id)).all()
        return [self._player_info(p) for p in players]

    def get_player_by_uuid(self, uuid: str) -> PlayerDetail:
        player = self.db.scalars(select(Player).where(Player.player_uuid == uuid).limit(1)).first()
        if not player:
            raise NotFound("Player not found")
        return self._player_detail(player)

    def get_player_by_id(self, player_id: int) -> PlayerDetail:
        player = self.db.get(Player, player_id)
        if not player:
            raise NotFound("Player not found")
        return self._player_detail(player)

    def _player_info(self, player: Player) -> PlayerInfo:
        return PlayerInfo(
            id=player.id,
            uuid=player.player_uuid,
            nick=player.player_nick,
            last_online=player.player_last_online,
        )

    def _player_detail(self, player: Player) -> PlayerDetail:
        hof_score = self.db.scalar(
            select(HallOfFame.score).where(HallOfFame.player_id == player.id).limit(1)
        )

        stats: Dict[str, List[StatEntry]] = {}
        for category, model in STAT_TABLES.items():
            rows = self.db.execute(
                select(model.stat_name, model.amount, model.position)
                .where(model.player_id == player.id)
                # Unranked entries last; stat_name keeps SQLite and MySQL in the same order
                .order_by(model.position.is_(None), model.position, model.stat_name)
            ).all()
            if rows:
                stats[category] = [
                    StatEntry(name=row.stat_name, value=int(row.amount or 0), position=row.position)
                    for row in rows
                ]

        return PlayerDetail(
            id=player.id,
            uuid=player.player_uuid,
            nick=player.player_nick,
            last_online=player.player_last_online,
            hof=int(hof_score or 0),
            stats=stats,
        )

    # --- Hall of Fame ---

    def get_hall_of_fame(self) -> List[HallOfFameEntry]:
        rows = self.db.execute(
            select(HallOfFame.player_id, Player.player_uuid, Player.player_nick, HallOfFame.score)
            .join(Player, HallOfFame.player_id == Player.id)
            .order_by(HallOfFame.score.desc(), HallOfFame.player_id)
            .limit(HALL_OF_FAME_SIZE)
        ).all()
        return [
            HallOfFameEntry(id=row.player_id, uuid=row.player_uuid, nick=row.player_nick, score=int(row.score or 0))
            for row in rows
        ]

    # --- Server ---

    def get_server_metadata(self) -> ServerMetadata:
        # Column select: the upstream row may carry a NULL last_update
        meta = self.db.execute(
            select(
                SyncMetadata.last_update,
                SyncMetadata.server_desc,
                SyncMetadata.server_url,
                SyncMetadata.server_icon,
            ).limit(1)
        ).first()
        if not meta:
            raise NotFound("No server data found")

        return ServerMetadata(
            last_update=meta.last_update,
            desc=meta.server_desc or self.settings.default_server_desc,
            url=meta.server_url or self.settings.default_server_url,
            icon=encode_icon(meta.server_icon, self.settings.default_server_icon),
        )

    def get_server_stats(self) -> AggregateStats:
        meta = self.db.execute(select(SyncMetadata.server_name, SyncMetadata.server_url).limit(1)).first()
        custom = STAT_TABLES["custom"]

        def total(model, *criteria) -> int:
            # SUM over no rows is NULL; MySQL hands back Decimal
            stmt = select(func.sum(model.amount))
            if criteria:
                stmt = stmt.where(*criteria)
            return int(self.db.scalar(stmt) or 0)

        totals = ServerTotals(
            player_count=int(self.db.scalar(select(func.count()).select_from(Player)) or 0),
            total_play_time=total(custom, custom.stat_name == "play_time"),
            total_damage_dealt=total(custom, custom.stat_name == "damage_dealt"),
            total_travelled_distance=total(custom, custom.stat_name.in_(DISTANCE_STATS)),
            total_broken_tools=total(STAT_TABLES["broken"]),
            total_crafted_items=total(STAT_TABLES["crafted"]),
            total_mined_blocks=total(STAT_TABLES["mined"]),
            total_killed_mobs=total(STAT_TABLES["killed"]),
            total_dropped_items=total(STAT_TABLES["dropped"]),
            total_pickedup_items=total(STAT_TABLES["picked_up"]),
        )

        return AggregateStats(
            server_name=(meta.server_name if meta else None) or "Unknown",
            server_url=(meta.server_url if meta else None) or "#",
            stats=totals,
        )

    # --- Leaderboards ---

    def get_stat_leaderboard(self, category: str, stat_name: str) -> List[LeaderboardRow]:
        model = STAT_TABLES.get(category)
        if model is None:
            raise QueryFailed(f"Unknown stat category: {category}")

        rows = self.db.execute(
            select(model.position, Player.id, Player.player_uuid, Player.player_nick, model.amount)
            .join(Player, model.player_id == Player.id)
            .where(model.stat_name == stat_name)
            .order_by(model.amount.desc(), Player.id)
        ).all()
        return [
            LeaderboardRow(
                rank=row.position,
                player_id=row.id,
                player_uuid=row.player_uuid,
                player_nick=row.player_nick,
                score=int(row.amount or 0),
            )
            for row in rows
        ]
