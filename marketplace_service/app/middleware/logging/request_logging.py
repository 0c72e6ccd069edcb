"""
HTTP access logging for the Marketplace Service.

Assigns every request a request id and a correlation id (taken from the
``X-Correlation-ID`` header when the caller sends one), logs start and
completion with timing, and echoes both ids back as response headers.
"""

import time
import uuid
from typing import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from marketplace_service.app.utils.logging import setup_marketplace_logging

logger = setup_marketplace_logging("marketplace_service_request_logging")

SLOW_REQUEST_MS = 1000


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """HTTP request/response lifecycle logging"""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = str(uuid.uuid4())
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        start_time = time.time()

        request.state.request_id = request_id
        request.state.correlation_id = correlation_id

        logger.info(
            "HTTP request started",
            extra={
                "request_id": request_id,
                "correlation_id": correlation_id,
                "method": request.method,
                "path": request.url.path,
                "query_params": dict(request.query_params),
                "user_agent": request.headers.get("user-agent", "unknown")[:200],
                "client_ip": self._get_client_ip(request),
                "event_type": "http_request_start",
            },
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"HTTP request failed: {str(e)}",
                extra={
                    "request_id": request_id,
                    "correlation_id": correlation_id,
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": round((time.time() - start_time) * 1000, 2),
                    "error_type": type(e).__name__,
                    "event_type": "http_request_error",
                },
            )
            raise

        duration_ms = round((time.time() - start_time) * 1000, 2)
        if response.status_code >= 500:
            log = logger.error
        elif response.status_code >= 400 or duration_ms > SLOW_REQUEST_MS:
            log = logger.warning
        else:
            log = logger.info

        log(
            "HTTP request completed",
            extra={
                "request_id": request_id,
                "correlation_id": correlation_id,
                "user_id": getattr(request.state, "user_id", "anonymous"),
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
                "event_type": "http_request_complete",
                "slow_request": duration_ms > SLOW_REQUEST_MS,
            },
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Correlation-ID"] = correlation_id
        return response

    def _get_client_ip(self, request: Request) -> str:
        """Client IP, honouring proxy headers"""
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip

        if request.client:
            return request.client.host

        return "unknown"


def setup_marketplace_request_logging(app: FastAPI) -> None:
    """Setup request logging middleware"""
    app.add_middleware(RequestLoggingMiddleware)
    logger.info(
        "Request logging middleware configured",
        extra={"event_type": "middleware_setup", "middleware": "request_logging"},
    )
