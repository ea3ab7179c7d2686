import logging
from fastapi import APIRouter, Depends
from hankosign.config import get_settings
from hankosign.modules.auth.schemas.auth_schemas import MessageResponse
from hankosign.modules.contact.schemas.contact_schemas import ContactRequest
from hankosign.services.email_sender import EmailSender, get_email_sender
from hankosign.services.email_templates import contact_confirmation_email, contact_support_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contact", tags=["contact"])

@router.post("", response_model=MessageResponse)
async def submit_contact(
    payload: ContactRequest,
    email_sender: EmailSender = Depends(get_email_sender)
):
    """
    Forward an inquiry to support and confirm receipt to the sender.
    Mail failures propagate as a 500.
    """
    # 1) Support team
    await email_sender.send(
        get_settings().SUPPORT_EMAIL,
        f"【お問い合わせ】{payload.subject}",
        contact_support_email(payload.name, payload.email, payload.company or "",
                              payload.subject, payload.message),
    )

    # 2) Confirmation to the sender
    await email_sender.send(
        payload.email,
        "【HankoSign】お問い合わせを受け付けました",
        contact_confirmation_email(payload.name, payload.subject),
    )

    logger.info(f"Contact inquiry received from {payload.email}")
    return MessageResponse(message="Your inquiry has been sent")
