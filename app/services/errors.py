# app/services/errors.py
"""
Typed failures raised by the auth flow and the slot ledger.
Each carries the HTTP status the API responds with, so callers can tell
"try again" (mismatch) from "start over" (not found / expired)
from "pick another slot" (already booked).
"""


class ParkingError(Exception):
    status_code = 400
    code = "error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


# ── Not found ────────────────────────────────────────────────────────────────
class NotFound(ParkingError):
    status_code = 404
    code = "not_found"


class UserNotFound(NotFound):
    status_code = 401
    code = "user_not_found"


class PasscodeNotFound(NotFound):
    status_code = 401
    code = "passcode_not_found"


class MallNotFound(NotFound):
    code = "mall_not_found"


class SlotNotFound(NotFound):
    code = "slot_not_found"


class BookingNotFound(NotFound):
    code = "booking_not_found"


# ── Mismatch ─────────────────────────────────────────────────────────────────
class Mismatch(ParkingError):
    status_code = 401
    code = "mismatch"


class PasswordMismatch(Mismatch):
    code = "password_mismatch"


class PasscodeMismatch(Mismatch):
    code = "passcode_mismatch"


# ── Slot ledger ──────────────────────────────────────────────────────────────
class SlotAlreadyBooked(ParkingError):
    status_code = 409
    code = "already_booked"


class BookingForbidden(ParkingError):
    status_code = 403
    code = "booking_forbidden"


class InvalidVehicleNumber(ParkingError):
    status_code = 422
    code = "invalid_vehicle_number"


# ── Sessions ─────────────────────────────────────────────────────────────────
class SessionExpired(ParkingError):
    status_code = 401
    code = "session_expired"


class SessionInvalid(ParkingError):
    status_code = 401
    code = "session_invalid"


# ── Registration / delivery ──────────────────────────────────────────────────
class EmailAlreadyRegistered(ParkingError):
    status_code = 409
    code = "email_taken"


class DeliveryFailure(ParkingError):
    status_code = 502
    code = "delivery_failed"
