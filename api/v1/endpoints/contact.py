"""
Contact Endpoints

Accepts contact-form submissions as JSON or URL-encoded bodies.

@.architecture
Incoming: api/v1/router.py, Frontend (HTTP POST) --- {HTTP requests to /api/contact with name, email, subject, message}
Processing: submit_contact() --- {2 jobs: presence_validation, delivery}
Outgoing: core/contact/mailer.py, Frontend (HTTP) --- {Mailer.send() call, MessageResponse / 400 ErrorResponse}
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import get_mailer, parse_body
from api.v1.schemas.common import ErrorResponse, MessageResponse
from core.contact import ContactMessage
from core.contact import Mailer
from monitoring import get_logger

logger = get_logger(__name__)
router = APIRouter(tags=["contact"])

FIELDS_REQUIRED_MESSAGE = "All fields are required"
SENT_MESSAGE = "🌸 Message sent successfully. I'll get back to you soon!"


@router.post(
    "/contact",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Send a contact message",
)
async def submit_contact(
    payload: Dict[str, Any] = Depends(parse_body),
    mailer: Mailer = Depends(get_mailer),
):
    """
    Validate that name, email, subject and message are all present, then
    hand the message to the mailer.
    """
    contact = ContactMessage.from_payload(payload)

    missing = contact.missing_fields()
    if missing:
        logger.info("Rejected contact message", missing=missing)
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(message=FIELDS_REQUIRED_MESSAGE).model_dump(exclude_none=True),
        )

    await mailer.send(contact)
    return MessageResponse(message=SENT_MESSAGE)
