"""
Acme Ice Cream API: Access Log Middleware
==========================================

What:  One access-log line per HTTP request, in the compact
       "METHOD path status duration - size" shape of a dev access log.
How:   Runs outside RequestIDMiddleware so it also sees the 500 responses
       that middleware produces; the request ID is read back from the
       X-Request-ID response header.

Example line:
    2024-01-15T12:00:00 [INFO] icecream_api.access: POST /api/flavors 201 4.2 ms - 62 [a1b2c3d4]

Request bodies are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from icecream_api.middleware.request_id import REQUEST_ID_HEADER

logger = logging.getLogger("icecream_api.access")


def level_for_status(status: int) -> int:
    """5xx → ERROR, 4xx → WARNING, anything else → INFO."""
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1f ms - %s [%s]",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            response.headers.get("content-length", "-"),
            response.headers.get(REQUEST_ID_HEADER, ""),
        )
        return response
