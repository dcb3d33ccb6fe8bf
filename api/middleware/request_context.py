"""
Request Context Middleware - API Layer

Binds a request ID to the logging context for the lifetime of a request and
echoes it back in the ``X-Request-ID`` response header.

@.architecture
Incoming: app.py (middleware registration), HTTP requests --- {X-Request-ID header}
Processing: __call__() --- {2 jobs: context_setup, cleanup}
Outgoing: monitoring/logging.py, Frontend (HTTP) --- {request_id context variable, X-Request-ID header}
"""

import uuid

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from monitoring import clear_request_context, set_request_context

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128


class RequestContextMiddleware:

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        incoming = Headers(scope=scope).get(REQUEST_ID_HEADER, "").strip()
        request_id = incoming[:MAX_REQUEST_ID_LENGTH] or uuid.uuid4().hex

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message)[REQUEST_ID_HEADER] = request_id
            await send(message)

        set_request_context(request_id=request_id)
        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            clear_request_context()
