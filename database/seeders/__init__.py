"""
Database Seeders Package
__init__.py for the seeders module
"""
from .snapshot_seeder import (
    HOF_POINTS,
    SAMPLE_PLAYERS,
    SAMPLE_SERVER,
    build_snapshot_bytes,
    compute_hall_of_fame,
    compute_positions,
    seed_snapshot_file,
    seed_statistics,
)

__all__ = [
    'HOF_POINTS',
    'SAMPLE_PLAYERS',
    'SAMPLE_SERVER',
    'build_snapshot_bytes',
    'compute_hall_of_fame',
    'compute_positions',
    'seed_snapshot_file',
    'seed_statistics',
]
