from typing import Optional

from letsgo.schemas.base import CamelModel


class ContactRequest(CamelModel):
    """Contact form. Fields are checked by the service so the error is uniform."""

    email: Optional[str] = None
    help_type: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None
