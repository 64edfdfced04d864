from sqlalchemy import Column, String, Text, LargeBinary
from database.models.base import Base
from database.models.types import EpochMillis

class SyncMetadata(Base):
    __tablename__ = "sync_metadata"

    # Singleton row written by the stats mod on every sync.
    # The upstream table has no key column; last_update identifies the row for the ORM.
    last_update = Column(EpochMillis, primary_key=True)
    server_name = Column(String(255), nullable=True)
    server_desc = Column(Text, nullable=True) # MOTD with § formatting codes
    server_url = Column(String(255), nullable=True)
    server_icon = Column(LargeBinary, nullable=True) # PNG bytes of server-icon.png
