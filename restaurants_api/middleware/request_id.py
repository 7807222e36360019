"""
Restaurants API - Request ID Middleware
========================================

What:  Assigns an ID to each incoming request and echoes it in the response.
Why:   Lets a 500 seen by a client be matched to the server-side log entry
       holding the real store error, which is never sent to the client.
How:   Uses the client's X-Request-ID header if present, otherwise a short
       UUID. Stored in a ContextVar for loggers and in request.state.

Unexpected exceptions escaping the route stack are answered here with the
generic 500 body, so those responses carry the header too.
"""

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware that assigns a unique ID to each request for tracing."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 8 chars is enough for correlation and readable in logs
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "[%s] Unexpected error on %s %s: %s",
                rid,
                request.method,
                request.url.path,
                str(e),
                exc_info=True,
            )
            response = JSONResponse(
                status_code=500, content={"message": "Internal server error"}
            )

        response.headers["X-Request-ID"] = rid
        return response
