"""
API Middleware - Request/response processing.

Provides:
- Request ID propagation (X-Request-ID)
- Per-request access log with latency (X-Response-Time-Ms)
- GraderMarketError to JSON envelope mapping
- Per-client rate limiting (429 + Retry-After)

Every error body uses the same envelope:
    {"error": {"code", "message", "details"}, "request_id": ...}
"""

from __future__ import annotations

import logging
import math
import time
import uuid
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from gradermarket.config.errors import ErrorCode, GraderMarketError

from .rate_limit import RateLimiter

logger = logging.getLogger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]

_UNHANDLED = GraderMarketError(ErrorCode.INTERNAL_ERROR, "Internal server error")

_STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.SEARCH_INVALID_QUERY: 400,
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.SECURITY_RATE_LIMITED: 429,
    # upstream answered with something unusable
    ErrorCode.CATALOG_INVALID_RESPONSE: 502,
    ErrorCode.CATALOG_UNAVAILABLE: 503,
    ErrorCode.STORAGE_READ_FAILED: 503,
    ErrorCode.STORAGE_WRITE_FAILED: 503,
}


def error_code_to_status(code: ErrorCode) -> int:
    """HTTP status for an error code (500 if unmapped)."""
    return _STATUS_BY_CODE.get(code, 500)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def error_response(
    request: Request,
    error: GraderMarketError,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Render an error in the standard envelope."""
    content: dict[str, Any] = {"error": error.to_dict(), "request_id": _request_id(request)}
    return JSONResponse(
        status_code=error_code_to_status(error.code),
        content=content,
        headers=headers,
    )


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's X-Request-ID or mint one, and echo it back."""

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        request.state.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex

        response = await call_next(request)
        response.headers["X-Request-ID"] = request.state.request_id
        return response


class LatencyMiddleware(BaseHTTPMiddleware):
    """One access-log line per request, with its wall-clock latency."""

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        response.headers["X-Response-Time-Ms"] = f"{elapsed_ms:.2f}"
        query = f"?{request.url.query}" if request.url.query else ""
        logger.info(
            "%s %s%s -> %d in %.1fms [%s]",
            request.method,
            request.url.path,
            query,
            response.status_code,
            elapsed_ms,
            _request_id(request),
        )
        return response


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turn exceptions raised by routes into enveloped JSON errors."""

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        try:
            return await call_next(request)
        except GraderMarketError as e:
            level = logging.ERROR if error_code_to_status(e.code) >= 500 else logging.WARNING
            logger.log(
                level,
                "%s on %s: %s %s [%s]",
                e.code.value,
                request.url.path,
                e.message,
                e.details,
                _request_id(request),
            )
            return error_response(request, e)
        except Exception:
            logger.exception("Unhandled error on %s [%s]", request.url.path, _request_id(request))
            return error_response(request, _UNHANDLED)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Per-client-IP fixed-window limit; /health is exempt."""

    exempt_paths = frozenset({"/health"})

    def __init__(self, app: ASGIApp, limiter: RateLimiter) -> None:
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        if request.url.path in self.exempt_paths:
            return await call_next(request)

        client = request.client.host if request.client else "unknown"

        if not self.limiter.check(client):
            retry_after = math.ceil(self.limiter.retry_after(client))
            logger.warning("Rate limit hit by %s [%s]", client, _request_id(request))
            error = GraderMarketError(
                ErrorCode.SECURITY_RATE_LIMITED,
                f"Too many requests, retry in {retry_after}s",
                {"retry_after": retry_after},
            )
            return error_response(request, error, headers={"Retry-After": str(retry_after)})

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.limiter.max_requests)
        response.headers["X-RateLimit-Remaining"] = str(self.limiter.remaining(client))
        return response
