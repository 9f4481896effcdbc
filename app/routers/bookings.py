# app/routers/bookings.py
"""
Slot reservation endpoints. The booking user is always the token subject.
409 on /book-slot means the slot was taken — pick another one.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.dependencies.auth import get_current_user_id
from app.schemas.booking import BookingCreate, BookingOut, BookingRelease
from app.services import slot_ledger

router = APIRouter()


@router.post("/book-slot", response_model=BookingOut, summary="Reserve a parking slot")
def book_slot(body: BookingCreate, db: Session = Depends(get_db),
              user_id: int = Depends(get_current_user_id)):
    return slot_ledger.reserve(db, body.slot_id, user_id, body.vehicle_number)


@router.get("/booking-details", response_model=list[BookingOut], summary="My active bookings")
def booking_details(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    return slot_ledger.bookings_for(db, user_id)


@router.delete("/unbook-slot", summary="Release a booking (exit parking)")
def unbook_slot(body: BookingRelease, db: Session = Depends(get_db),
                user_id: int = Depends(get_current_user_id)):
    slot_id = slot_ledger.release(db, body.id, user_id=user_id)
    return {"status": "released", "booking_id": body.id, "slot_id": slot_id}
