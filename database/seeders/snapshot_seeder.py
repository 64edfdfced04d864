"""
Snapshot Seeder
Synthesizes statistics databases (snapshot files or remote schemas) from
plain player dicts, ranking every stat and scoring the Hall of Fame the same
way the stats mod does.
"""
import sqlite3
import datetime
from typing import Dict, Iterable, List, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from database.connection import create_file_engine
from database.models import Base, HallOfFame, Player, STAT_CATEGORIES, STAT_TABLES, SyncMetadata

# Points for 1st..5th place in every stat column
HOF_POINTS = {1: 10, 2: 5, 3: 3, 4: 2, 5: 1}

SAMPLE_PLAYERS = [
    {
        "uuid": "069a79f4-44e9-4726-a5be-fca90e38aaf5",
        "nick": "Notch",
        "last_online": datetime.datetime(2026, 10, 18, 21, 4, tzinfo=datetime.timezone.utc),
        "stats": {
            "custom": {"play_time": 864000, "damage_dealt": 15420, "walk_one_cm": 9120000, "jump": 5210},
            "mined": {"stone": 12840, "diamond_ore": 61, "oak_log": 930},
            "crafted": {"crafting_table": 14, "torch": 512},
            "killed": {"zombie": 240, "creeper": 71},
            "killed_by": {"creeper": 6},
            "used": {"diamond_pickaxe": 9120},
            "picked_up": {"cobblestone": 10210},
            "dropped": {"cobblestone": 4100},
            "broken": {"iron_pickaxe": 7},
        },
    },
    {
        "uuid": "853c80ef-3c37-49fd-aa49-938b674adae6",
        "nick": "jeb_",
        "last_online": datetime.datetime(2026, 10, 17, 9, 30, tzinfo=datetime.timezone.utc),
        "stats": {
            "custom": {"play_time": 512000, "damage_dealt": 20110, "sprint_one_cm": 4400000, "jump": 7002},
            "mined": {"stone": 9921, "diamond_ore": 80},
            "crafted": {"torch": 1024},
            "killed": {"zombie": 310, "skeleton": 120},
            "used": {"diamond_pickaxe": 6400},
            "picked_up": {"cobblestone": 8120},
        },
    },
    {
        "uuid": "61699b2e-d327-4a01-9f1e-0ea8c3f06bc6",
        "nick": "Dinnerbone",
        "last_online": datetime.datetime(2026, 10, 12, 18, 45, tzinfo=datetime.timezone.utc),
        "stats": {
            "custom": {"play_time": 302000, "boat_one_cm": 1250000},
            "mined": {"stone": 4410},
            "killed_by": {"zombie": 3, "creeper": 2},
        },
    },
]

SAMPLE_SERVER = {
    "server_name": "Survival",
    "server_desc": "§a§lSurvival Server §7- §eBienvenido!",
    "server_url": "https://example.org",
    "server_icon": None,
}


def compute_positions(players: List[Dict]) -> Dict[tuple, int]:
    """
    Ranks each (category, stat) column by descending value.
    Equal values share a place and the next place is skipped (1, 1, 3).
    Returns {(player_index, category, stat_name): position}.
    """
    columns: Dict[tuple, List[tuple]] = {}
    for index, player in enumerate(players):
        for category, stats in player.get("stats", {}).items():
            for stat_name, value in stats.items():
                columns.setdefault((category, stat_name), []).append((index, value))

    positions = {}
    for (category, stat_name), entries in columns.items():
        entries.sort(key=lambda e: (-e[1], e[0]))
        previous_value = None
        previous_position = 0
        for place, (index, value) in enumerate(entries, start=1):
            position = previous_position if value == previous_value else place
            positions[(index, category, stat_name)] = position
            previous_value, previous_position = value, position
    return positions


def compute_hall_of_fame(positions: Dict[tuple, int], player_count: int) -> List[int]:
    """Sums placement points per player across every stat column."""
    scores = [0] * player_count
    for (index, _category, _stat_name), position in positions.items():
        scores[index] += HOF_POINTS.get(position, 0)
    return scores


def seed_statistics(
    engine: Engine,
    players: Iterable[Dict],
    server: Optional[Dict] = None,
    last_update: Optional[datetime.datetime] = None,
    hof_scores: Optional[List[int]] = None,
) -> List[int]:
    """
    Creates the statistics schema on `engine` and fills it.

    Players get ids 1..n in the given order. `hof_scores` overrides the
    computed Hall of Fame (one score per player, None to leave a player out).
    Returns the scores that were written.
    """
    players = list(players)
    for player in players:
        for category in player.get("stats", {}):
            if category not in STAT_CATEGORIES:
                raise ValueError(f"Unknown stat category: {category}")

    positions = compute_positions(players)
    if hof_scores is None:
        hof_scores = compute_hall_of_fame(positions, len(players))

    Base.metadata.create_all(bind=engine)
    with Session(engine) as db:
        with db.begin():
            for index, data in enumerate(players):
                player_id = index + 1
                db.add(Player(
                    id=player_id,
                    player_uuid=data["uuid"],
                    player_nick=data.get("nick"),
                    player_last_online=data.get("last_online"),
                ))
                db.flush()

                for category, stats in data.get("stats", {}).items():
                    model = STAT_TABLES[category]
                    for stat_name, value in stats.items():
                        db.add(model(
                            player_id=player_id,
                            stat_name=stat_name,
                            amount=value,
                            position=positions[(index, category, stat_name)],
                        ))

                if index < len(hof_scores) and hof_scores[index] is not None:
                    db.add(HallOfFame(player_id=player_id, score=hof_scores[index]))

            if server is not None:
                db.add(SyncMetadata(
                    last_update=last_update or datetime.datetime.now(datetime.timezone.utc),
                    server_name=server.get("server_name"),
                    server_desc=server.get("server_desc"),
                    server_url=server.get("server_url"),
                    server_icon=server.get("server_icon"),
                ))

    return hof_scores


def build_snapshot_bytes(players: Iterable[Dict], server: Optional[Dict] = None, **kwargs) -> bytes:
    """Seeds an in-memory database and returns it serialized, ready to serve as a snapshot."""
    dbapi_connection = sqlite3.connect(":memory:", check_same_thread=False)
    engine = create_engine("sqlite://", creator=lambda: dbapi_connection, poolclass=StaticPool)
    try:
        seed_statistics(engine, players, server, **kwargs)
        return bytes(dbapi_connection.serialize())
    finally:
        engine.dispose()
        dbapi_connection.close()


def seed_snapshot_file(
    path: str,
    players: Iterable[Dict] = SAMPLE_PLAYERS,
    server: Optional[Dict] = SAMPLE_SERVER,
    **kwargs,
) -> List[int]:
    """Seed a snapshot file on disk, with the sample data by default."""
    engine = create_file_engine(path)
    try:
        return seed_statistics(engine, players, server, **kwargs)
    finally:
        engine.dispose()


if __name__ == "__main__":
    import sys
    target = sys.argv[1] if len(sys.argv) > 1 else "player-statistics.db"
    scores = seed_snapshot_file(target)
    print(f"Seeded {len(scores)} players into {target}")
