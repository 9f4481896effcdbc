# app/services/auth_service.py
"""
Two-factor login flow.

  authenticate()      password check → issue passcode → deliver out-of-band
  confirm_passcode()  verify + consume passcode → mint session token
"""

from sqlalchemy.orm import Session
from app.models.user import User
from app.services.errors import DeliveryFailure, PasswordMismatch
from app.services.notification_service import PasscodeNotifier
from app.services.passcode_registry import PasscodeRegistry
from app.services.session_issuer import SessionIssuer
from app.services.user_service import create_user, find_by_email, normalize_email
from app.utils.security import verify_password
from app.utils.logger import get_logger

logger = get_logger(__name__)


def register(db: Session, name: str, email: str, password: str, phone_number: str = None) -> User:
    return create_user(db, name, email, password, phone_number)


def authenticate(db: Session, email: str, password: str,
                 registry: PasscodeRegistry, notifier: PasscodeNotifier) -> None:
    """
    First factor. Raises UserNotFound, PasswordMismatch or DeliveryFailure.
    On delivery failure the issued code is discarded so it can never be redeemed.
    """
    user = find_by_email(db, email)
    if not verify_password(password, user.password_hash):
        logger.warning(f"[AUTH] Wrong password for {user.email}")
        raise PasswordMismatch("Incorrect password")

    code = registry.issue(user.email)
    try:
        notifier.deliver(user.email, code)
    except DeliveryFailure:
        registry.discard(user.email)
        raise
    except Exception as e:
        registry.discard(user.email)
        logger.error(f"[AUTH] Unexpected delivery error for {user.email}: {e}", exc_info=True)
        raise DeliveryFailure(f"Could not deliver OTP to {user.email}") from e


def confirm_passcode(db: Session, email: str, code: str,
                     registry: PasscodeRegistry, issuer: SessionIssuer) -> str:
    """Second factor. Returns a session token; raises PasscodeNotFound / PasscodeMismatch."""
    email = normalize_email(email)
    registry.verify(email, code)
    user = find_by_email(db, email)
    token = issuer.mint(user.id)
    logger.info(f"[AUTH] Session issued for user {user.id}")
    return token
