"""
API Dependencies

FastAPI dependency injection functions for:
- Settings access
- Catalog repositories
- Contact mailer
- Request body parsing

Components are created once by app.create_app() and stored on
``app.state``; the getters below only read them back.

@.architecture
Incoming: app.py (app.state population), api/v1/endpoints/*.py --- {Depends() injections from endpoints}
Processing: get_settings(), get_project_repository(), get_student_repository(), get_mailer(), read_body(), parse_body() --- {3 jobs: dependency_injection, body_decoding, size_validation}
Outgoing: api/v1/endpoints/*.py --- {Settings, ProjectRepository, StudentRepository, Mailer, Dict parsed body, raises ValidationError}
"""

import json
from typing import Any, Dict

from fastapi import Request
from starlette.types import Message

from config.settings import Settings
from core.contact import Mailer
from data.catalog import ProjectRepository, StudentRepository
from monitoring import get_logger
from security.validation import ValidationError, validate_body_size

logger = get_logger(__name__)


# =============================================================================
# Component Dependencies
# =============================================================================

def get_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings


def get_project_repository(request: Request) -> ProjectRepository:
    return request.app.state.project_repository


def get_student_repository(request: Request) -> StudentRepository:
    return request.app.state.student_repository


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


# =============================================================================
# Body Parsing
# =============================================================================

JSON_CONTENT_TYPES = ("application/json",)
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _media_type(request: Request) -> str:
    content_type = request.headers.get("content-type", "")
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type


async def read_body(request: Request, limit: int) -> bytes:
    """
    Read the request body, stopping as soon as it passes ``limit`` bytes.

    A declared ``Content-Length`` is checked before anything is read;
    chunked bodies are counted as they arrive.

    Raises:
        SizeExceededError: Body larger than ``limit``
    """
    declared = request.headers.get("content-length")
    if declared and declared.isdigit():
        validate_body_size(int(declared), limit)

    chunks = []
    received = 0
    async for chunk in request.stream():
        received += len(chunk)
        validate_body_size(received, limit)
        chunks.append(chunk)
    return b"".join(chunks)


async def _parse_form(request: Request, body: bytes) -> Dict[str, Any]:
    async def replay() -> Message:
        return {"type": "http.request", "body": body, "more_body": False}

    form = await Request(request.scope, replay).form()
    return {key: form.get(key) for key in form.keys()}


async def parse_body(request: Request) -> Dict[str, Any]:
    """
    Decode a JSON or URL-encoded request body into a dict.

    Other content types (or an empty body) yield an empty dict, leaving
    presence checks to the endpoint.

    Raises:
        SizeExceededError: Body larger than the configured ceiling
        ValidationError: Malformed JSON, or JSON that is not an object
    """
    settings: Settings = request.app.state.settings
    body = await read_body(request, settings.security.max_body_size_bytes)

    if not body:
        return {}

    media_type = _media_type(request)

    if media_type in JSON_CONTENT_TYPES or media_type.endswith("+json"):
        try:
            payload = json.loads(body)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ValidationError(f"Malformed JSON body: {e}") from e
        if not isinstance(payload, dict):
            raise ValidationError("JSON body must be an object")
        return payload

    if media_type == FORM_CONTENT_TYPE:
        return await _parse_form(request, body)

    logger.debug("Ignoring body with unsupported content type", content_type=media_type)
    return {}
