# app/routers/malls.py
"""Mall listing and free-slot lookup."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.dependencies.auth import get_current_user_id
from app.schemas.mall import MallOut, SlotOut
from app.services import mall_service, slot_ledger

router = APIRouter()


@router.get("/malls", response_model=list[MallOut], summary="List malls")
def list_malls(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    return mall_service.list_malls(db)


@router.get("/available-slots/{mall_id}", response_model=list[SlotOut], summary="Free slots in a mall")
def available_slots(mall_id: int, db: Session = Depends(get_db),
                    user_id: int = Depends(get_current_user_id)):
    mall_service.get_mall(db, mall_id)
    return slot_ledger.list_available(db, mall_id)
