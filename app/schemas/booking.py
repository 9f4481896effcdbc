from pydantic import BaseModel, Field
from datetime import datetime


class BookingCreate(BaseModel):
    slot_id: int
    vehicle_number: str = Field(min_length=1, max_length=20)


class BookingRelease(BaseModel):
    id: int


class BookingOut(BaseModel):
    id: int
    slot_id: int
    user_id: int
    vehicle_number: str
    created_at: datetime

    class Config:
        from_attributes = True
