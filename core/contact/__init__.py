"""
Contact - contact-form messages and their delivery
"""

from .message import REQUIRED_FIELDS, ContactMessage
from .mailer import LogMailer, Mailer

__all__ = [
    "REQUIRED_FIELDS",
    "ContactMessage",
    "LogMailer",
    "Mailer",
]
