from sqlalchemy import Column, Integer, BigInteger, String, ForeignKey
from sqlalchemy.orm import declared_attr
from database.models.base import Base

STAT_CATEGORIES = (
    "broken",
    "crafted",
    "custom",
    "dropped",
    "killed",
    "killed_by",
    "mined",
    "picked_up",
    "used",
)

class StatMixin:
    """
    Columns shared by every stat category table.
    One row per (player, stat), e.g. mined/stone or custom/play_time.
    """

    @declared_attr
    def player_id(cls):
        return Column(Integer, ForeignKey("uuid_map.id"), primary_key=True)

    stat_name = Column(String(128), primary_key=True)
    amount = Column(BigInteger, nullable=False, default=0)
    position = Column(Integer, nullable=True) # Rank inside (category, stat_name), 1 = best

    category = None

class BrokenStat(StatMixin, Base):
    __tablename__ = "broken"
    category = "broken"

class CraftedStat(StatMixin, Base):
    __tablename__ = "crafted"
    category = "crafted"

class CustomStat(StatMixin, Base):
    __tablename__ = "custom"
    category = "custom"

class DroppedStat(StatMixin, Base):
    __tablename__ = "dropped"
    category = "dropped"

class KilledStat(StatMixin, Base):
    __tablename__ = "killed"
    category = "killed"

class KilledByStat(StatMixin, Base):
    __tablename__ = "killed_by"
    category = "killed_by"

class MinedStat(StatMixin, Base):
    __tablename__ = "mined"
    category = "mined"

class PickedUpStat(StatMixin, Base):
    __tablename__ = "picked_up"
    category = "picked_up"

class UsedStat(StatMixin, Base):
    __tablename__ = "used"
    category = "used"

# Category name -> mapped table, in display order
STAT_TABLES = {
    model.category: model
    for model in (
        BrokenStat,
        CraftedStat,
        CustomStat,
        DroppedStat,
        KilledStat,
        KilledByStat,
        MinedStat,
        PickedUpStat,
        UsedStat,
    )
}
