from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from database.models.base import Base
from database.models.types import EpochMillis

class Player(Base):
    __tablename__ = "uuid_map"

    id = Column(Integer, primary_key=True)
    player_uuid = Column(String(36), unique=True, nullable=False) # Mojang UUID, dashed form
    player_nick = Column(String(64)) # Last known name, can change between syncs
    player_last_online = Column(EpochMillis)

    # Relationships
    hall_of_fame = relationship("HallOfFame", uselist=False, back_populates="player")
