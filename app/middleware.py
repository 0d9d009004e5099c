"""Request admission middleware backed by the sliding-window rate limiter."""
from __future__ import annotations

import logging
from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from app.cors import cors_headers
from app.rate_limit import SlidingWindowRateLimiter
from app.utils import host_from_address

LOGGER = logging.getLogger(__name__)


def client_key(request: Request) -> str:
    """Derive the rate-limit key from the request's address metadata."""

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    peer = request.scope.get("client")
    if not peer:
        return "unknown"
    host = peer if isinstance(peer, str) else peer[0]
    return host_from_address(host)


class AdmissionMiddleware(BaseHTTPMiddleware):
    """Gate protected paths behind a per-client quota."""

    def __init__(
        self,
        app: ASGIApp,
        limiter: SlidingWindowRateLimiter,
        protected_paths: Iterable[str] = ("/api/parse",),
    ) -> None:
        super().__init__(app)
        self.limiter = limiter
        self.protected_paths = frozenset(protected_paths)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path not in self.protected_paths:
            return await call_next(request)
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=cors_headers())

        key = client_key(request)
        admitted, retry_after = self.limiter.allow(key)
        if not admitted:
            LOGGER.info(
                "rate limit exceeded",
                extra={
                    "client_key": key,
                    "status": 429,
                    "retry_after": retry_after,
                    "path": request.url.path,
                },
            )
            return self._deny(retry_after)

        try:
            return await call_next(request)
        except Exception:
            LOGGER.exception("Unhandled exception", extra={"client_key": key})
            raise

    def _deny(self, retry_after: float) -> JSONResponse:
        headers = cors_headers()
        headers["Retry-After"] = str(int(retry_after) + 1)
        return JSONResponse(
            status_code=429,
            content={
                "error": "rate limit exceeded",
                "limit": self.limiter.limit,
                "window_seconds": int(self.limiter.window),
            },
            headers=headers,
        )
