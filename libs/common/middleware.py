"""Observability middleware for FastAPI.

Every request gets a request id (taken from X-Request-ID or generated), which
is bound to the logging context, echoed back in the response headers and
attached to the start/completion log lines together with the duration.

Usage:
    from libs.common.middleware import add_observability_middleware

    app = FastAPI()
    add_observability_middleware(app)
"""
import time
from typing import Callable, Iterable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from libs.common.logging import (
    clear_request_context,
    configure_logging,
    get_logger,
    set_request_context,
)

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
QUIET_PATHS = ("/health",)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind request context and log the request lifecycle.

    Paths in `quiet_paths` still get a request id but are not logged.
    The duration is also returned as a Server-Timing header so clients can
    compare server time with what they observe.
    """

    def __init__(self, app: ASGIApp, quiet_paths: Iterable[str] = QUIET_PATHS):
        super().__init__(app)
        self.quiet_paths = frozenset(quiet_paths)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = set_request_context(
            request_id=request.headers.get(REQUEST_ID_HEADER),
            path=request.url.path,
            method=request.method,
        )
        quiet = request.url.path in self.quiet_paths
        started = time.perf_counter()

        if not quiet:
            query = str(request.url.query) or None
            logger.info("Request started", extra={"extra_fields": {"query": query}})

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.exception(
                "Request failed with unhandled exception",
                extra={
                    "extra_fields": {
                        "error": str(exc),
                        "duration_ms": _elapsed_ms(started),
                    }
                },
            )
            raise
        else:
            duration_ms = _elapsed_ms(started)
            if not quiet:
                log = logger.warning if response.status_code >= 400 else logger.info
                log(
                    "Request completed",
                    extra={
                        "extra_fields": {
                            "status_code": response.status_code,
                            "duration_ms": duration_ms,
                        }
                    },
                )
            response.headers[REQUEST_ID_HEADER] = request_id
            response.headers["Server-Timing"] = f"app;dur={duration_ms}"
            return response
        finally:
            clear_request_context()


def add_observability_middleware(
    app: FastAPI, quiet_paths: Iterable[str] = QUIET_PATHS
) -> None:
    """Configure logging and install RequestContextMiddleware on `app`."""
    configure_logging()
    app.add_middleware(RequestContextMiddleware, quiet_paths=quiet_paths)
    logger.info("Observability middleware initialized")
