# app/models/slot_booking.py
"""
Active slot bookings.
A booking row exists only while the slot is held; release deletes it.
The unique slot_id therefore means at most one active booking per slot.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from app.database import Base


class SlotBooking(Base):
    __tablename__ = "slot_bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    slot_id = Column(Integer, ForeignKey("parking_slots.id", ondelete="CASCADE"),
                     unique=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    vehicle_number = Column(String(20), nullable=False)
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<SlotBooking {self.id} slot={self.slot_id} user={self.user_id} plate={self.vehicle_number}>"
