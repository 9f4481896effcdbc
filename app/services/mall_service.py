# app/services/mall_service.py
"""Mall catalogue lookups. Used by the malls router."""

from sqlalchemy.orm import Session
from app.models.mall import Mall
from app.services.errors import MallNotFound


def list_malls(db: Session):
    return db.query(Mall).order_by(Mall.id).all()


def get_mall(db: Session, mall_id: int) -> Mall:
    mall = db.query(Mall).filter(Mall.id == mall_id).first()
    if not mall:
        raise MallNotFound(f"Mall {mall_id} not found")
    return mall
