import smtplib

from letsgo.core.errors import ServerError, ValidationFailed
from letsgo.core.logger import LetsGoLogger
from letsgo.schemas.contact import ContactRequest
from letsgo.services.mail import Mailer, contact_email


def relay_contact_message(mailer: Mailer, inbox: str, form: ContactRequest) -> None:
    """Forward a contact form submission to the support inbox."""
    if not all([form.email, form.help_type, form.subject, form.message]):
        raise ValidationFailed("All fields are required")

    try:
        mailer.send(
            inbox,
            f"[Contato Let's Go Party] {form.help_type} - {form.subject}",
            contact_email(form.email, form.help_type, form.subject, form.message),
            reply_to=form.email,
        )
    except (smtplib.SMTPException, OSError) as e:
        LetsGoLogger.exception(f"Failed to relay contact message from {form.email}")
        raise ServerError("Failed to send message, please try again later", detail=str(e))
