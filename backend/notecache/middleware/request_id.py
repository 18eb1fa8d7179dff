"""
NoteCache — Request ID Middleware
==================================

What:  Tags each request with a short ID and echoes it back in the
       X-Request-ID response header.
Why:   Every log line and every error body for one request carries the same ID,
       so a client-reported error can be matched to server logs.
How:   Reuses a client-supplied X-Request-ID when it is a short token of
       printable ASCII, otherwise generates one. The ID lives in a ContextVar
       and on request.state.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local storage for the current request ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"

# What: Longest client-supplied ID that is echoed instead of replaced
MAX_REQUEST_ID_LENGTH = 64

_REQUEST_ID_PATTERN = re.compile(r"[!-~]+")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def accepted_request_id(value: Optional[str]) -> Optional[str]:
    """The client's ID if it is safe to echo into headers and logs, else None."""
    if not value or len(value) > MAX_REQUEST_ID_LENGTH:
        return None
    if not _REQUEST_ID_PATTERN.fullmatch(value):
        return None
    return value


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Behavior:
        1. Use the client's X-Request-ID when it is 1-64 printable ASCII
           characters without spaces
        2. Otherwise generate 8 hex characters from a UUID4
        3. Store in ContextVar (loggers, exception handlers) and request.state
        4. Add to response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = accepted_request_id(request.headers.get(REQUEST_ID_HEADER)) or new_request_id()

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
