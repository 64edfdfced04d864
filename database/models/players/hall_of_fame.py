from sqlalchemy import Column, Integer, ForeignKey
from sqlalchemy.orm import relationship
from database.models.base import Base

class HallOfFame(Base):
    __tablename__ = "hall_of_fame"

    # One row per player, computed upstream by the stats mod
    player_id = Column(Integer, ForeignKey("uuid_map.id"), primary_key=True)
    score = Column(Integer, nullable=False, default=0)

    player = relationship("Player", back_populates="hall_of_fame")
