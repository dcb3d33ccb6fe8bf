"""
Contact Message - Core Layer

A contact-form submission and its presence rules.

@.architecture
Incoming: api/v1/endpoints/contact.py --- {parsed request body dict}
Processing: from_payload(), missing_fields() --- {2 jobs: coercion, presence_validation}
Outgoing: api/v1/endpoints/contact.py, core/contact/mailer.py --- {ContactMessage}
"""

import json
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel

from security.validation import is_empty, missing_fields

REQUIRED_FIELDS = ("name", "email", "subject", "message")


class ContactMessage(BaseModel):
    """
    A contact-form submission.

    Fields are optional at the model level; presence is checked by
    ``missing_fields()`` so that the endpoint can answer with its own
    400 body instead of FastAPI's 422.
    """
    name: Optional[str] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ContactMessage":
        """
        Build from a parsed body, keeping only known fields.

        Empty values (see ``security.validation.is_empty``) become None;
        strings are kept as-is and any other JSON value as its JSON text.
        """
        values = {}
        for name in REQUIRED_FIELDS:
            value = payload.get(name)
            if is_empty(value):
                values[name] = None
            elif isinstance(value, str):
                values[name] = value
            else:
                values[name] = json.dumps(value, ensure_ascii=False)
        return cls(**values)

    def missing_fields(self) -> List[str]:
        return missing_fields(self.model_dump(), REQUIRED_FIELDS)
