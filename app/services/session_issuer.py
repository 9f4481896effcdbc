# app/services/session_issuer.py
"""
Stateless session tokens.
A token is an HS256 JWT carrying the user id (sub) and an expiry one hour
after issuance. Nothing is stored server-side, so tokens cannot be revoked
before they expire.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from jose import jwt, ExpiredSignatureError, JWTError

from app.config import settings
from app.services.errors import SessionExpired, SessionInvalid
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionIssuer:
    def __init__(self, secret: str, ttl_minutes: int = 60, algorithm: str = "HS256",
                 clock: Callable[[], datetime] = _utcnow):
        self.secret = secret
        self.ttl = timedelta(minutes=ttl_minutes)
        self.algorithm = algorithm
        self._clock = clock

    def mint(self, subject_id) -> str:
        now = self._clock()
        payload = {
            "sub": str(subject_id),
            "iat": int(now.timestamp()),
            "exp": int((now + self.ttl).timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def validate(self, token: str) -> int:
        """Return the subject id, or raise SessionExpired / SessionInvalid."""
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm],
                                 options={"verify_iat": False})
        except ExpiredSignatureError:
            raise SessionExpired("Session token has expired")
        except JWTError as e:
            logger.debug(f"[AUTH] Rejected token: {e}")
            raise SessionInvalid("Invalid session token")

        subject: Optional[str] = payload.get("sub")
        try:
            return int(subject)
        except (TypeError, ValueError):
            raise SessionInvalid("Session token has no valid subject")


session_issuer = SessionIssuer(
    secret=settings.JWT_SECRET,
    ttl_minutes=settings.SESSION_TTL_MINUTES,
    algorithm=settings.JWT_ALGORITHM,
)
