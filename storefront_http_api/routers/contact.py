# storefront_http_api/routers/contact.py

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront_http_api.db.session import get_session
from storefront_http_api.mail import SMTPMailer, get_mailer
from storefront_http_api.schemas.common import MessageResponse
from storefront_http_api.schemas.contact import ContactRequest
from storefront_http_api.services.contact_service import ContactService

router = APIRouter(prefix="/contact", tags=["contact"])


def get_contact_service(
    session: Session = Depends(get_session),
    mailer: SMTPMailer = Depends(get_mailer),
) -> ContactService:
    return ContactService(session, mailer)


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Send a message to the shop",
    description="The message is mailed to the configured contact address with the sender as Reply-To.",
)
def send_contact_message(
    *,
    payload: ContactRequest,
    service: ContactService = Depends(get_contact_service),
) -> MessageResponse:
    return service.submit(payload)
