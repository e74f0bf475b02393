"""
Custom middleware: request logging/metrics and per-client rate limiting.
"""

import logging
import math
import time
from collections.abc import Callable
from typing import Dict, Tuple

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from ascend.metrics import AppMetrics

logger = logging.getLogger("ascend.http")

RATE_LIMIT_EXEMPT_PATHS = frozenset({"/api/goals/health"})


def _route_path(request: Request) -> str:
    """
    Full request path with matched path parameters put back as ``{name}``,
    e.g. ``/api/goals/{goal_id}``. Keeps metric label cardinality bounded.
    """
    if request.scope.get("route") is None:
        return "unmatched"
    names = {str(value): "{%s}" % name for name, value in request.path_params.items()}
    return "/".join(names.get(segment, segment) for segment in request.url.path.split("/"))


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every request and records it in the request metrics."""

    def __init__(self, app, metrics: AppMetrics):
        super().__init__(app)
        self.metrics = metrics

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        path = _route_path(request)
        logger.info(
            "http_request",
            extra={
                "method": request.method,
                "path": path,
                "status_code": response.status_code,
                "response_time_ms": round(duration * 1000, 2),
            },
        )
        self.metrics.observe_request(request.method, path, response.status_code, duration)
        response.headers["X-Process-Time"] = str(duration)
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Fixed-window limiter keyed by client address.
    At most ``max_requests`` per ``window_ms``; counters live in this process only.
    """

    def __init__(self, app, window_ms: int, max_requests: int):
        super().__init__(app)
        self.window_seconds = window_ms / 1000
        self.max_requests = max_requests
        self._windows: Dict[str, Tuple[float, int]] = {}
        self._next_sweep = 0.0

    def _client_key(self, request: Request) -> str:
        return request.client.host if request.client else "unknown"

    def _sweep(self, now: float) -> None:
        """Drop clients whose window has ended; runs at most once per window."""
        if now < self._next_sweep:
            return
        self._next_sweep = now + self.window_seconds
        expired = [key for key, (start, _) in self._windows.items() if now - start >= self.window_seconds]
        for key in expired:
            del self._windows[key]

    def hit(self, key: str, now: float) -> int:
        """Count a request; returns seconds to wait, 0 when allowed."""
        self._sweep(now)
        window_start, count = self._windows.get(key, (now, 0))
        if now - window_start >= self.window_seconds:
            window_start, count = now, 0
        if count >= self.max_requests:
            self._windows[key] = (window_start, count)
            return max(1, math.ceil(window_start + self.window_seconds - now))
        self._windows[key] = (window_start, count + 1)
        return 0

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in RATE_LIMIT_EXEMPT_PATHS:
            return await call_next(request)

        key = self._client_key(request)
        retry_after = self.hit(key, time.monotonic())
        if retry_after:
            logger.warning("rate_limit_exceeded", extra={"client": key, "retry_after": retry_after})
            return JSONResponse(
                status_code=429,
                content={"error": "Too many requests"},
                headers={"Retry-After": str(retry_after)},
            )
        return await call_next(request)
