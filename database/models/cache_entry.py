from sqlalchemy import Column, String, BigInteger, LargeBinary
from database.models.base import CacheBase

class CachedSnapshot(CacheBase):
    __tablename__ = "database"

    key = Column(String(64), primary_key=True) # Always "cachedDatabase"
    db = Column(LargeBinary, nullable=False) # Serialized SQLite snapshot
    timestamp = Column(BigInteger, nullable=False) # Epoch milliseconds of the write
