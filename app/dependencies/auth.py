# app/dependencies/auth.py
"""
FastAPI dependencies for the auth flow and protected routes.
Providers return the process-wide registry / issuer / notifier; tests
swap them through app.dependency_overrides.
"""

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.services.errors import SessionInvalid
from app.services.notification_service import PasscodeNotifier, notifier
from app.services.passcode_registry import PasscodeRegistry, passcode_registry
from app.services.session_issuer import SessionIssuer, session_issuer

security = HTTPBearer(auto_error=False)


def get_passcode_registry() -> PasscodeRegistry:
    return passcode_registry


def get_session_issuer() -> SessionIssuer:
    return session_issuer


def get_notifier() -> PasscodeNotifier:
    return notifier

def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> int:
    """Subject of the bearer token. SessionExpired / SessionInvalid reach the ParkingError handler."""
    if credentials is None:
        raise SessionInvalid("Missing bearer token")
    return issuer.validate(credentials.credentials)
