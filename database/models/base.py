from sqlalchemy import MetaData
from sqlalchemy.orm import declarative_base

# NAMING CONVENTION: deterministic constraint names on SQLite and MySQL alike
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Statistics schema (snapshot file and remote MySQL schema)
metadata = MetaData(naming_convention=convention)
Base = declarative_base(metadata=metadata)

# Local snapshot cache store, kept in its own file and metadata
cache_metadata = MetaData(naming_convention=convention)
CacheBase = declarative_base(metadata=cache_metadata)
