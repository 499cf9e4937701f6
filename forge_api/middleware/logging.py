"""
Forge API - Request Logging Middleware
========================================

What:  One access log line per HTTP request.
How:   Times the rest of the stack and logs method, path, status, duration,
       request ID, client IP and, for requests that passed the authorization
       guard, the token subject.

Example line:
    PUT /notes/5b0c... 200 4.2ms [1f0c9a2e] from 127.0.0.1 as alice

Request bodies and the Authorization header are never logged, so neither
passwords nor tokens end up in the access log.
"""

import logging
import time
from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from forge_api.middleware.request_id import request_id_var

logger = logging.getLogger("forge_api.access")

DEFAULT_QUIET_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access logging for every path except quiet_paths (probes)."""

    def __init__(self, app: ASGIApp, quiet_paths: Iterable[str] = DEFAULT_QUIET_PATHS):
        super().__init__(app)
        self.quiet_paths = frozenset(quiet_paths)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.quiet_paths:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        rid = request_id_var.get("")
        client_ip = request.client.host if request.client else "unknown"
        # Set by require_authenticated_user on the protected routes
        subject = getattr(request.state, "subject", None)

        message = "%s %s %d %.1fms [%s] from %s"
        args = [request.method, request.url.path, response.status_code, duration_ms, rid, client_ip]
        if subject:
            message += " as %s"
            args.append(subject)

        logger.log(
            level_for_status(response.status_code),
            message,
            *args,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
                "subject": subject,
            },
        )
        return response
