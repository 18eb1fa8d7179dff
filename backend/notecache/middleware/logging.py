"""
NoteCache — Request Logging Middleware
=======================================

What:  One access log line per note request: method, path, note name, status,
       duration.
Why:   The access log is the only record of which notes were touched and how
       long the filesystem took to answer.
How:   Measures wall time around the downstream call and picks the log level
       from the status class.

What we log vs what we DON'T log:
    ✅ Log: method, path, note name, status, duration, client IP, request ID
    ❌ Don't log: request or response bodies (note contents)
    ❌ Don't log: health checks and the API docs pages
"""

import logging
import time
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notecache.middleware.request_id import request_id_var

logger = logging.getLogger("notecache.access")

# What: Paths that produce no access log line
QUIET_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json", "/docs/oauth2-redirect"})

_NOTE_PREFIX = "/notes/"


def note_name_from_path(path: str) -> Optional[str]:
    """Note addressed by a /notes/{name} path, or None for any other path."""
    if path.startswith(_NOTE_PREFIX) and len(path) > len(_NOTE_PREFIX):
        # scope["path"] is already percent-decoded
        return path[len(_NOTE_PREFIX):]
    return None


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request after the response is produced.

    Level by status:
        5xx → ERROR
        4xx → WARNING
        else → INFO
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        note = note_name_from_path(path)
        rid = request_id_var.get("")
        client_ip = request.client.host if request.client else "unknown"
        status = response.status_code

        logger.log(
            _level_for(status),
            "%s %s note=%r %d %.1fms [%s] from %s",
            request.method,
            path,
            note,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "note": note,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
