# app/routers/auth.py
"""
Registration and two-factor login.
POST /register    — create a user
POST /login       — password check, emails a one-time passcode
POST /verify-otp  — exchange the passcode for a bearer token
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.dependencies.auth import get_notifier, get_passcode_registry, get_session_issuer
from app.schemas.user import LoginRequest, OtpVerifyRequest, TokenOut, UserCreate
from app.services import auth_service
from app.services.notification_service import PasscodeNotifier
from app.services.passcode_registry import PasscodeRegistry
from app.services.session_issuer import SessionIssuer

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED, summary="Register a new user")
def register(body: UserCreate, db: Session = Depends(get_db)):
    user = auth_service.register(db, body.name, body.email, body.password, body.phone_number)
    return {"status": "created", "user_id": user.id}


@router.post("/login", summary="Step 1 — password check, sends OTP by email")
def login(
    body: LoginRequest,
    db: Session = Depends(get_db),
    registry: PasscodeRegistry = Depends(get_passcode_registry),
    notifier: PasscodeNotifier = Depends(get_notifier),
):
    auth_service.authenticate(db, body.email, body.password, registry, notifier)
    return {"status": "otp_sent", "detail": "OTP has been sent to your email."}


@router.post("/verify-otp", response_model=TokenOut, summary="Step 2 — verify OTP, get token")
def verify_otp(
    body: OtpVerifyRequest,
    db: Session = Depends(get_db),
    registry: PasscodeRegistry = Depends(get_passcode_registry),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    token = auth_service.confirm_passcode(db, body.email, body.otp, registry, issuer)
    return TokenOut(access_token=token)
