from pydantic import BaseModel
from typing import Optional


class MallOut(BaseModel):
    id: int
    name: str
    location: Optional[str]

    class Config:
        from_attributes = True


class SlotOut(BaseModel):
    id: int
    mall_id: int
    slot_number: str
    status: str

    class Config:
        from_attributes = True
