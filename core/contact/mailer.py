"""
Contact Mailer - Core Layer

Delivery of contact-form messages. The only implementation records the
message in the log instead of sending mail; the message body itself is
never logged.

@.architecture
Incoming: api/v1/endpoints/contact.py, app.py (construction) --- {ContactMessage}
Processing: send() --- {1 job: delivery}
Outgoing: monitoring/logging.py --- {structured log line with name, email, subject}
"""

from abc import ABC, abstractmethod

from .message import ContactMessage
from monitoring import get_logger

logger = get_logger(__name__)


class Mailer(ABC):
    """Outbound transport for contact messages."""

    @abstractmethod
    async def send(self, message: ContactMessage) -> None:
        """Deliver ``message``; raise on failure."""


class LogMailer(Mailer):
    """Writes one log line per message and delivers nothing."""

    async def send(self, message: ContactMessage) -> None:
        logger.info(
            "New contact message",
            name=message.name,
            email=message.email,
            subject=message.subject,
        )
