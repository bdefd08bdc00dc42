"""
VibeCoding - HTTP Middleware
Request/Response logging, timing, and context management
"""

import time
from typing import Callable, Set
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from vibecoding.core.logging_config import (
    logger,
    set_request_id,
    set_conversation_id,
    generate_request_id,
)


# Paths that should skip detailed logging (health checks, docs)
SKIP_LOGGING_PATHS: Set[str] = {
    "/health",
    "/api/v1/health",
    "/",
    "/favicon.ico",
    "/docs",
    "/redoc",
    "/openapi.json",
}

# Paths that use SSE/streaming, their duration is the whole generation
STREAMING_PATHS: Set[str] = {
    "/api/v1/chat/stream",
    "/api/v1/vibecoding/generate-stream",
}


def is_streaming_path(path: str) -> bool:
    """Check if path uses SSE/streaming responses"""
    return any(path.startswith(streaming_path) for streaming_path in STREAMING_PATHS)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status and duration of each request.

    - Generates and tracks request IDs for correlation
    - Sets context variables for downstream logging
    - Adds X-Request-ID header to responses
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_id(request_id)

        path = request.url.path
        if "/vibecoding/" in path:
            conversation_id = path.split("/vibecoding/", 1)[1].split("/")[0]
            if conversation_id and conversation_id not in ("generate", "generate-stream"):
                set_conversation_id(conversation_id)

        skip_logging = path in SKIP_LOGGING_PATHS
        start_time = time.perf_counter()

        if not skip_logging:
            logger.info(
                f"→ {request.method} {path}",
                extra={
                    "event_type": "http_request_start",
                    "http_method": request.method,
                    "http_path": path,
                }
            )

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

        if not skip_logging:
            status_code = response.status_code
            if status_code >= 500:
                log_func = logger.error
            elif status_code >= 400:
                log_func = logger.warning
            else:
                log_func = logger.info

            log_func(
                f"← {request.method} {path} - {status_code} ({duration_ms:.2f}ms)",
                extra={
                    "event_type": "http_request_complete",
                    "http_method": request.method,
                    "http_path": path,
                    "http_status": status_code,
                    "duration_ms": duration_ms,
                    "is_streaming": is_streaming_path(path),
                }
            )

        return response
