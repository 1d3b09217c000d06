"""Request correlation middleware for the admin API."""

import time
import uuid
from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.logging import get_logger, request_id_ctx

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128

# Probes are polled constantly; log them at debug only.
QUIET_PATH_PREFIXES = ("/health",)


def resolve_request_id(value: str | None) -> str:
    """Use the caller's request id when it is sane, otherwise mint one."""
    if value and len(value) <= MAX_REQUEST_ID_LENGTH and value.isprintable():
        return value
    return str(uuid.uuid4())


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Bind a request id for the lifetime of each request.

    Seed and clear runs triggered over HTTP can then be traced from the access
    log into the per-record seeder events.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        token = request_id_ctx.set(request_id)
        started = time.perf_counter()
        path = request.url.path

        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)

        log = logger.debug if path.startswith(QUIET_PATH_PREFIXES) else logger.info
        log(
            "http.request_completed",
            request_id=request_id,
            method=request.method,
            path=path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
