# app/services/notification_service.py
"""
Out-of-band delivery of one-time passcodes.

EmailNotifier sends the code through SMTP (Gmail by default).
LogNotifier only writes it to the log, for local development.
Any delivery problem is raised as DeliveryFailure so the login attempt
is aborted instead of reporting success.
"""

import smtplib
from abc import ABC, abstractmethod
from email.message import EmailMessage

from app.config import settings
from app.services.errors import DeliveryFailure
from app.utils.logger import get_logger

logger = get_logger(__name__)


class PasscodeNotifier(ABC):
    """Out-of-band channel for passcodes. deliver() raises DeliveryFailure on failure."""

    @abstractmethod
    def deliver(self, identity: str, code: str) -> None:
        pass


class EmailNotifier(PasscodeNotifier):
    def __init__(self, host: str, port: int, username: str = None, password: str = None,
                 sender: str = None, timeout: float = 10):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender or username
        self.timeout = timeout

    def build_message(self, identity: str, code: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = identity
        msg["Subject"] = "Your OTP for Login"
        msg.set_content(f"Your OTP for login is: {code}")
        return msg

    def deliver(self, identity: str, code: str) -> None:
        if not self.sender:
            raise DeliveryFailure("Email delivery is not configured (GMAIL_USER missing)")

        msg = self.build_message(identity, code)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password or "")
                refused = smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"[OTP] Email delivery to {identity} failed: {e}")
            raise DeliveryFailure(f"Could not deliver OTP to {identity}") from e

        if refused:
            logger.error(f"[OTP] Recipient refused: {refused}")
            raise DeliveryFailure(f"Could not deliver OTP to {identity}")
        logger.info(f"[OTP] Passcode emailed to {identity}")


class LogNotifier(PasscodeNotifier):
    """Development channel — the code only appears in the application log."""

    def deliver(self, identity: str, code: str) -> None:
        logger.warning(f"[OTP] Passcode for {identity}: {code}")


def build_notifier(channel: str = None) -> PasscodeNotifier:
    channel = (channel or settings.OTP_DELIVERY).lower()
    if channel == "log":
        return LogNotifier()
    if channel == "email":
        return EmailNotifier(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.GMAIL_USER,
            password=settings.GMAIL_PASS,
            timeout=settings.SMTP_TIMEOUT_SECONDS,
        )
    raise ValueError(f"Unknown OTP delivery channel: {channel}")


notifier = build_notifier()
