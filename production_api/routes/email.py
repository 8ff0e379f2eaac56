"""
Contact-form email relay route.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from production_api.config import Settings, get_settings
from production_api.dependencies import get_mailer
from production_api.errors import MailError, ValidationError
from production_api.mailer import Mailer, OutgoingMail
from production_api.schemas import EmailRequest, MessageResponse

router = APIRouter(prefix="/email", tags=["Email"])


@router.post("/send-email", response_model=MessageResponse)
def send_email(
    payload: EmailRequest,
    mailer: Mailer = Depends(get_mailer),
    settings: Settings = Depends(get_settings),
):
    if not all(
        (payload.senderEmail, payload.senderPassword, payload.subject, payload.message)
    ):
        raise ValidationError("All fields are required")
    if not settings.email_recipient:
        raise MailError("Email recipient is not configured")

    mailer.send(
        OutgoingMail(
            sender_email=payload.senderEmail,
            sender_password=payload.senderPassword,
            recipient=settings.email_recipient,
            subject=payload.subject,
            message=payload.message,
        )
    )
    return MessageResponse(message="Email sent successfully")
