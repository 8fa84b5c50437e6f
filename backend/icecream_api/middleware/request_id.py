"""
Acme Ice Cream API: Request ID Middleware
==========================================

What:  Tags every request with a short ID, echoed in the X-Request-ID
       response header, and turns unhandled exceptions into the generic 500.
How:   The ID lives in a ContextVar for the duration of the request, so the
       exception handlers in main.py log with it. Exceptions that none of
       those handlers claims surface from `call_next`; they are logged here,
       while the ID is still in scope, and answered with the same body the
       database handler uses.
"""

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
GENERIC_SERVER_ERROR = "Internal Server Error"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def _new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assigns the request ID and guarantees it on every response.

    A client-supplied X-Request-ID is reused; otherwise an 8-character hex
    ID is generated.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or _new_request_id()
        token = request_id_var.set(rid)
        request.state.request_id = rid

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "[%s] Unexpected error on %s %s: %s",
                rid, request.method, request.url.path, exc,
                exc_info=True,
            )
            response = JSONResponse(status_code=500, content={"error": GENERIC_SERVER_ERROR})
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
