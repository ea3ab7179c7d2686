"""
Outgoing email.

Built once at startup from the settings and handed to handlers through
``get_email_sender``. Without SMTP credentials the sender logs the message
instead of delivering it, so local development works without a mail server.
"""

import logging
from typing import Dict, Optional

from fastapi import Request
from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType

from hankosign.config import Settings

logger = logging.getLogger(__name__)


class EmailSender:

    def __init__(self, settings: Settings):
        self.mail: Optional[FastMail] = None
        if settings.mail_configured:
            conf = ConnectionConfig(
                MAIL_USERNAME=settings.MAIL_USERNAME,
                MAIL_PASSWORD=settings.MAIL_PASSWORD,
                MAIL_FROM=settings.MAIL_FROM,
                MAIL_FROM_NAME=settings.MAIL_FROM_NAME,
                MAIL_PORT=settings.MAIL_PORT,
                MAIL_SERVER=settings.MAIL_SERVER,
                MAIL_STARTTLS=settings.MAIL_STARTTLS,
                MAIL_SSL_TLS=settings.MAIL_SSL_TLS,
                USE_CREDENTIALS=True,
                VALIDATE_CERTS=True,
            )
            self.mail = FastMail(conf)
            logger.info("Email service configured")
        else:
            logger.warning("Email credentials not configured; outgoing mail will be logged only")

    async def send(self, to: str, subject: str, html: str) -> Dict[str, str]:
        """Send one HTML email. Delivery errors propagate to the caller."""
        if self.mail is None:
            logger.info(f"EMAIL SIMULATION to={to} subject={subject!r}")
            return {"status": "simulated"}

        message = MessageSchema(
            subject=subject,
            recipients=[to],
            body=html,
            subtype=MessageType.html,
        )
        await self.mail.send_message(message)
        logger.info(f"Email sent to {to}: {subject!r}")
        return {"status": "sent"}


def get_email_sender(request: Request) -> EmailSender:
    return request.app.state.email_sender
