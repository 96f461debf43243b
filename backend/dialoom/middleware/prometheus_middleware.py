"""
Prometheus metrics middleware for HTTP request tracking.

Records duration and status code of every request through the
prometheus_metrics module.
"""

import time
from typing import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..monitoring.prometheus_metrics import prometheus_metrics


def _endpoint_label(request: Request) -> str:
    # Route templates keep ULIDs out of the label set: /api/bookings/{booking_id}
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    return path if isinstance(path, str) else "unmatched"


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware to collect Prometheus metrics for HTTP requests."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.url.path == "/metrics/prometheus":
            return await call_next(request)

        start_time = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            prometheus_metrics.record_http_request(
                method=request.method,
                endpoint=_endpoint_label(request),
                duration=time.perf_counter() - start_time,
                status_code=status_code,
            )
