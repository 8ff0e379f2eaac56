"""
Contact-form mail relay.

The sender authenticates with their own mailbox; the SMTP server is picked
from the sender's email domain and every message goes to one configured
recipient.
"""

from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass, field
from email.message import EmailMessage
from typing import Protocol

from production_api.errors import MailError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SmtpProvider:
    name: str
    host: str
    port: int = 587


GMAIL = SmtpProvider(name="Gmail", host="smtp.gmail.com")
OUTLOOK = SmtpProvider(name="Outlook", host="smtp-mail.outlook.com")

_PROVIDER_DOMAINS = (
    ("gmail.com", GMAIL),
    ("outlook.com", OUTLOOK),
    ("hotmail.com", OUTLOOK),
    ("lau.edu", OUTLOOK),
)


def resolve_provider(sender_email: str) -> SmtpProvider:
    domain = sender_email.rpartition("@")[2].lower()
    for suffix, provider in _PROVIDER_DOMAINS:
        if domain == suffix or domain.endswith("." + suffix):
            return provider
    raise ValidationError("Unsupported email provider")


@dataclass
class OutgoingMail:
    sender_email: str
    sender_password: str
    recipient: str
    subject: str
    message: str

    def to_message(self) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.sender_email
        msg["To"] = self.recipient
        msg["Subject"] = self.subject
        msg.set_content(self.message)
        return msg


class Mailer(Protocol):
    def send(self, mail: OutgoingMail) -> None:
        ...


@dataclass
class InMemoryMailer:
    """Test double that records messages instead of sending them."""

    sent: list = field(default_factory=list)
    fail: bool = False

    def send(self, mail: OutgoingMail) -> None:
        resolve_provider(mail.sender_email)
        if self.fail:
            raise MailError("Failed to send email")
        self.sent.append(mail)


@dataclass
class SmtpMailer:
    timeout: float = 30.0

    def send(self, mail: OutgoingMail) -> None:
        provider = resolve_provider(mail.sender_email)
        try:
            with smtplib.SMTP(provider.host, provider.port, timeout=self.timeout) as smtp:
                smtp.starttls()
                smtp.login(mail.sender_email, mail.sender_password)
                smtp.send_message(mail.to_message())
        except (smtplib.SMTPException, OSError) as exc:
            logger.exception("Sending mail via %s failed", provider.name)
            raise MailError("Failed to send email") from exc
        logger.info("Relayed contact mail from %s via %s", mail.sender_email, provider.name)
