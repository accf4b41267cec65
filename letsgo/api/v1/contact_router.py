from fastapi import APIRouter, Depends

from letsgo.core.config import settings
from letsgo.core.deps import get_mailer
from letsgo.schemas.base import MessageResponse
from letsgo.schemas.contact import ContactRequest
from letsgo.services.contact import relay_contact_message
from letsgo.services.mail import Mailer

router = APIRouter(tags=["contact"])


@router.post("/contato", response_model=MessageResponse)
def contact(form: ContactRequest, mailer: Mailer = Depends(get_mailer)):
    relay_contact_message(mailer, settings.contact_address, form)
    return MessageResponse(message="Message sent successfully. We will get back to you soon.")
