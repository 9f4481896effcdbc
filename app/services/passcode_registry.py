# app/services/passcode_registry.py
"""
One-time passcode registry — second factor of the login flow.

Per identity the state is one of:
  NoCode   → no entry in the map
  Pending  → entry with code + expiry
  Consumed → entry removed by a successful verify

Expiry is checked lazily on every read, and run_expiry_sweep() purges stale
entries in the background so the map does not grow with abandoned logins.
All reads and writes go through one lock; presence of the entry is the single
source of truth for verify.
"""

import asyncio
import enum
import secrets
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from app.config import settings
from app.services.errors import PasscodeMismatch, PasscodeNotFound
from app.utils.logger import get_logger

logger = get_logger(__name__)

CODE_MIN = 100000
CODE_MAX = 999999


class PasscodeState(str, enum.Enum):
    NO_CODE = "no_code"
    PENDING = "pending"
    CONSUMED = "consumed"


@dataclass
class PasscodeEntry:
    identity_key: str
    code: str
    issued_at: float
    ttl: float
    state: PasscodeState = PasscodeState.PENDING

    @property
    def expires_at(self) -> float:
        return self.issued_at + self.ttl

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


def generate_code() -> str:
    """Uniform 6-digit code in [100000, 999999]."""
    return str(CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1))


class PasscodeRegistry:
    def __init__(self, ttl_seconds: float = 300, clock: Callable[[], float] = time.monotonic,
                 code_factory: Callable[[], str] = generate_code):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._code_factory = code_factory
        self._entries: Dict[str, PasscodeEntry] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(identity: str) -> str:
        return identity.strip().lower()

    def issue(self, identity: str) -> str:
        """Issue a fresh code for identity, replacing any live one. Returns the code."""
        key = self._key(identity)
        code = self._code_factory()
        with self._lock:
            replaced = key in self._entries
            self._entries[key] = PasscodeEntry(identity_key=key, code=code,
                                               issued_at=self._clock(), ttl=self.ttl_seconds)
        logger.info(f"[OTP] Issued passcode for {key}" + (" (replaced previous)" if replaced else ""))
        return code

    def consume(self, identity: str, submitted_code: str) -> PasscodeEntry:
        """
        Consume the live code for identity and return the entry, now CONSUMED.
        Raises PasscodeNotFound when there is no live entry (never issued,
        already consumed, or expired) and PasscodeMismatch when the code differs.
        """
        key = self._key(identity)
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.is_expired(self._clock()):
                del self._entries[key]
                entry = None
            if entry is None:
                raise PasscodeNotFound("OTP expired or not found")
            if not secrets.compare_digest(entry.code.encode(), str(submitted_code).strip().encode()):
                raise PasscodeMismatch("Invalid OTP")
            del self._entries[key]
            entry.state = PasscodeState.CONSUMED
        logger.info(f"[OTP] Passcode verified for {key}")
        return entry

    def verify(self, identity: str, submitted_code: str) -> bool:
        """True once per issued code; same failures as consume()."""
        self.consume(identity, submitted_code)
        return True

    def discard(self, identity: str) -> bool:
        """Drop a pending code without verifying it. Returns True if one was removed."""
        with self._lock:
            return self._entries.pop(self._key(identity), None) is not None

    def state_of(self, identity: str) -> PasscodeState:
        key = self._key(identity)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry.is_expired(self._clock()):
                return PasscodeState.NO_CODE
            return entry.state

    def sweep(self) -> int:
        """Remove expired entries. Returns how many were dropped."""
        now = self._clock()
        with self._lock:
            stale = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.debug(f"[OTP] Swept {len(stale)} expired passcode(s)")
        return len(stale)

    def __len__(self):
        with self._lock:
            return len(self._entries)


async def run_expiry_sweep(registry: PasscodeRegistry, interval: Optional[float] = None):
    """Background task: periodically purge expired passcodes until cancelled."""
    interval = interval or settings.OTP_SWEEP_INTERVAL_SECONDS
    logger.info(f"🧹 Passcode expiry sweep running every {interval}s")
    while True:
        await asyncio.sleep(interval)
        registry.sweep()


passcode_registry = PasscodeRegistry(ttl_seconds=settings.OTP_TTL_SECONDS)
