# app/services/slot_ledger.py
"""
Slot ledger — reservation and release of parking slots.

reserve() claims a slot with a conditional UPDATE (status free → occupied).
The database serialises concurrent updates of the same row, so of N
concurrent reserves on one free slot exactly one sees rowcount == 1; the
others see 0 and fail with SlotAlreadyBooked immediately. The booking row is
inserted in the same transaction, and slot_bookings.slot_id is UNIQUE as a
second guard. Reserves on different slots touch different rows and do not
contend.

release() deletes the booking with a conditional DELETE and frees the slot in
one transaction. A second release of the same id deletes nothing and fails
with BookingNotFound.
"""

from datetime import datetime
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.parking_slot import ParkingSlot, SlotStatus
from app.models.slot_booking import SlotBooking
from app.services.errors import (
    BookingForbidden, BookingNotFound, InvalidVehicleNumber, SlotAlreadyBooked, SlotNotFound,
)
from app.utils.logger import get_logger

logger = get_logger(__name__)

MAX_VEHICLE_NUMBER_LENGTH = 20


def normalize_vehicle_number(vehicle_number: str) -> str:
    plate = (vehicle_number or "").strip().upper()
    if not plate or len(plate) > MAX_VEHICLE_NUMBER_LENGTH:
        raise InvalidVehicleNumber(f"Invalid vehicle number: {vehicle_number!r}")
    return plate


def list_available(db: Session, mall_id: int) -> List[ParkingSlot]:
    """Free slots of a mall, ordered by id. Read-only."""
    return (
        db.query(ParkingSlot)
        .filter(ParkingSlot.mall_id == mall_id, ParkingSlot.status == SlotStatus.FREE.value)
        .order_by(ParkingSlot.id)
        .all()
    )


def reserve(db: Session, slot_id: int, user_id: int, vehicle_number: str) -> SlotBooking:
    """
    Atomically claim slot_id for user_id and create the booking.
    Raises SlotNotFound if the slot does not exist, SlotAlreadyBooked if it is occupied.
    """
    plate = normalize_vehicle_number(vehicle_number)
    booking = None
    try:
        claimed = (
            db.query(ParkingSlot)
            .filter(ParkingSlot.id == slot_id, ParkingSlot.status == SlotStatus.FREE.value)
            .update({ParkingSlot.status: SlotStatus.OCCUPIED.value}, synchronize_session=False)
        )
        if claimed == 1:
            booking = SlotBooking(
                slot_id=slot_id,
                user_id=user_id,
                vehicle_number=plate,
                created_at=datetime.utcnow(),
            )
            db.add(booking)
            db.commit()
    except IntegrityError:
        db.rollback()
        # Only a booking already holding the slot means "taken"; FK failures propagate
        if db.query(SlotBooking.id).filter(SlotBooking.slot_id == slot_id).first():
            raise SlotAlreadyBooked(f"Slot {slot_id} is already booked")
        raise
    except Exception:
        db.rollback()
        raise

    if booking is None:
        exists = db.query(ParkingSlot.id).filter(ParkingSlot.id == slot_id).first()
        db.rollback()
        if not exists:
            raise SlotNotFound(f"Slot {slot_id} not found")
        logger.info(f"[LEDGER] Slot {slot_id} already booked — rejected user {user_id}")
        raise SlotAlreadyBooked(f"Slot {slot_id} is already booked")

    db.refresh(booking)
    logger.info(f"[LEDGER] Booking {booking.id}: slot={slot_id} user={user_id} plate={plate}")
    return booking


def release(db: Session, booking_id: int, user_id: int = None) -> int:
    """
    Delete the booking and free its slot in one transaction.
    Raises BookingNotFound if there is no active booking with that id.
    When user_id is given, only the owner may release.
    Returns the id of the freed slot.
    """
    try:
        booking = db.query(SlotBooking).filter(SlotBooking.id == booking_id).first()
        if not booking:
            raise BookingNotFound(f"Booking {booking_id} not found")
        if user_id is not None and booking.user_id != user_id:
            raise BookingForbidden(f"Booking {booking_id} belongs to another user")

        slot_id = booking.slot_id
        db.expunge(booking)
        deleted = (
            db.query(SlotBooking)
            .filter(SlotBooking.id == booking_id)
            .delete(synchronize_session=False)
        )
        if deleted != 1:
            # Released concurrently between the read and the delete
            raise BookingNotFound(f"Booking {booking_id} not found")

        db.query(ParkingSlot).filter(ParkingSlot.id == slot_id).update(
            {ParkingSlot.status: SlotStatus.FREE.value}, synchronize_session=False
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"[LEDGER] Booking {booking_id} released — slot {slot_id} free")
    return slot_id


def bookings_for(db: Session, user_id: int) -> List[SlotBooking]:
    """Active bookings of a user in insertion order."""
    return (
        db.query(SlotBooking)
        .filter(SlotBooking.user_id == user_id)
        .order_by(SlotBooking.id)
        .all()
    )
