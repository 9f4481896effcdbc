# app/services/user_service.py
"""
Credential store helpers.
Used by auth_service and the auth router.
"""

from datetime import datetime
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.models.user import User
from app.services.errors import EmailAlreadyRegistered, UserNotFound
from app.utils.security import hash_password
from app.utils.logger import get_logger

logger = get_logger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def find_by_email(db: Session, email: str) -> User:
    """Fetch a user by email. Raises UserNotFound if absent."""
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if not user:
        raise UserNotFound("User not found")
    return user


def create_user(db: Session, name: str, email: str, password: str, phone_number: str = None) -> User:
    """Persist a new user with a bcrypt password hash."""
    email = normalize_email(email)
    if db.query(User).filter(User.email == email).first():
        raise EmailAlreadyRegistered(f"Email {email} already registered")

    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        phone_number=phone_number,
        created_at=datetime.utcnow(),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise EmailAlreadyRegistered(f"Email {email} already registered")
    db.refresh(user)
    logger.info(f"[AUTH] Registered user {user.id} ({email})")
    return user
