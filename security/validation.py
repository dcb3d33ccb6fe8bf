"""
Input Validation - Security Layer

Size limits and presence checks for request bodies. Content is never
rewritten here: values are either accepted as-is or rejected.

@.architecture
Incoming: api/dependencies.py, core/contact/message.py --- {int body size, Dict payload, field names}
Processing: validate_body_size(), is_empty(), missing_fields() --- {2 jobs: size_validation, presence_validation}
Outgoing: api/dependencies.py, core/contact/message.py, api/middleware/error_handler.py --- {List[str] missing field names, raises ValidationError / SizeExceededError}
"""

from typing import Any, Iterable, List, Mapping


class ValidationError(Exception):
    """Raised when input validation fails."""
    pass


class SizeExceededError(ValidationError):
    """Raised when input exceeds size limits."""
    pass


def validate_body_size(size_bytes: int, limit: int) -> None:
    """
    Validate a request body size.

    Raises:
        SizeExceededError: If the body is larger than ``limit``
    """
    if size_bytes > limit:
        raise SizeExceededError(
            f"Request body of {size_bytes / (1024 * 1024):.2f}MB exceeds "
            f"maximum {limit / (1024 * 1024):.2f}MB"
        )


def is_empty(value: Any) -> bool:
    """
    True for values that leave a form field unset.

    Absent, null, false, zero (or NaN) and the empty string are empty.
    Any other string, including whitespace, and any object or array count
    as present.
    """
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0 or value != value  # NaN
    if isinstance(value, str):
        return value == ""
    return False


def missing_fields(payload: Mapping[str, Any], required: Iterable[str]) -> List[str]:
    """Names from ``required`` that are empty in ``payload``, in order."""
    return [name for name in required if is_empty(payload.get(name))]
