import re
import time
import uuid
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
# Client ids are echoed into logs and headers, so only plain tokens are kept.
_ACCEPTED_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,128}$")


def resolve_request_id(raw: str | None) -> str:
    """The client's request id when it is a plain token, else a fresh UUID4."""
    if raw and _ACCEPTED_REQUEST_ID.match(raw):
        return raw
    return str(uuid.uuid4())


class CorrelationIdMiddleware:
    """Bind a request id into structlog's contextvars for the whole request.

    Checkout, cart and status-update logs carry ``correlation_id``; the id
    is echoed back in the ``X-Request-ID`` response header.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=request_id)

        started = time.monotonic()
        logger.info("http.request_started", method=request.method, path=request.path)

        response = self.get_response(request)

        logger.info(
            "http.request_finished",
            method=request.method,
            path=request.path,
            status_code=response.status_code,
            duration_ms=round((time.monotonic() - started) * 1000, 2),
        )
        response[REQUEST_ID_HEADER] = request_id
        return response
