# app/models/parking_slot.py
"""
Parking slots table.
Rows are provisioned per mall (scripts/setup/init_db.py --seed).
Status is only flipped by the slot ledger's reserve/release transitions.
"""

import enum

from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from app.database import Base


class SlotStatus(str, enum.Enum):
    FREE = "free"
    OCCUPIED = "occupied"


class ParkingSlot(Base):
    __tablename__ = "parking_slots"
    __table_args__ = (
        UniqueConstraint("mall_id", "slot_number", name="uq_parking_slots_mall_slot_number"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    mall_id = Column(Integer, ForeignKey("malls.id", ondelete="CASCADE"), nullable=False, index=True)
    slot_number = Column(String(20), nullable=False)
    status = Column(String(20), default=SlotStatus.FREE.value, nullable=False, index=True)  # free | occupied

    def __repr__(self):
        return f"<ParkingSlot {self.id} mall={self.mall_id} status={self.status}>"
