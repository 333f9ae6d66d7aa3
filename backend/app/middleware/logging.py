"""
Portfolio API — Request Logging Middleware
===========================================

What:  One access-log line per request: method, path, status, duration,
       request id and client address.
How:   Log level follows the status class (5xx → ERROR, 4xx → WARNING,
       everything else → INFO). Request bodies and uploaded file contents
       are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("portfolio.access")

# Polled every few seconds by Docker and load balancers
_QUIET_PATHS = {"/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Writes one access line per request to the `portfolio.access` logger.

    Log Levels:
        - 5xx → ERROR
        - 4xx → WARNING
        - else → INFO

    Health checks are not logged. Requests that end in an unhandled
    exception produce no access line; the catch-all handler logs them
    with a stack trace.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in _QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            request.url.path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
