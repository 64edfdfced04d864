"""
Seeder Runner
Main entry point to build fixture statistics databases
"""
import sys
import os

# Add the project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from typing import Optional

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from app.config import get_settings
from database.connection import create_file_engine, create_remote_engine
from database.models import Base
from database.seeders.snapshot_seeder import seed_snapshot_file, SAMPLE_PLAYERS

DEFAULT_TARGET = os.path.join(os.path.dirname(os.path.abspath(__file__)), "instance", "player-statistics.db")


def create_statistics_schema(target: Optional[str] = None) -> bool:
    """
    Create the statistics tables (uuid_map, stat tables, hall_of_fame, sync_metadata).
    Uses the SQLite file `target` when given, the configured remote database otherwise.
    Existing tables are left untouched.
    """
    print("=" * 50)
    print("Creating Statistics Schema...")
    print("=" * 50)

    try:
        engine = create_file_engine(target) if target else create_remote_engine(get_settings())
    except (SQLAlchemyError, OSError) as e:
        print(f"[SCHEMA] Could not open database ✗: {e}")
        return False

    try:
        existing = set(inspect(engine).get_table_names())
        Base.metadata.create_all(bind=engine, checkfirst=True)
    except (SQLAlchemyError, OSError) as e:
        print(f"[SCHEMA] Schema creation failed ✗: {e}")
        return False
    finally:
        engine.dispose()

    for table in Base.metadata.sorted_tables:
        state = "exists" if table.name in existing else "created"
        print(f"[SCHEMA] {table.name:<14} {state}")

    print("\n" + "=" * 50)
    print("Schema ready ✓")
    print("=" * 50)
    return True


def run_snapshot_seeder(target: str = DEFAULT_TARGET, overwrite: bool = False) -> bool:
    """Build the sample snapshot file at `target`"""
    print("=" * 50)
    print("Building Sample Snapshot...")
    print("=" * 50)

    if os.path.exists(target):
        if not overwrite:
            print(f"[SEEDER] {target} already exists. Skipping seed.")
            return False
        os.remove(target)

    try:
        scores = seed_snapshot_file(target)
    except Exception as e:
        print(f"[SEEDER] Snapshot seeder failed ✗: {e}")
        return False

    for player, score in zip(SAMPLE_PLAYERS, scores):
        print(f"[SEEDER] {player['nick']:<12} hall of fame: {score}")

    print("\n" + "=" * 50)
    print(f"Snapshot written to {target} ✓")
    print("=" * 50)
    return True


if __name__ == "__main__":
    if len(sys.argv) > 1:
        run_snapshot_seeder(sys.argv[1], overwrite="--overwrite" in sys.argv)
    else:
        run_snapshot_seeder()
