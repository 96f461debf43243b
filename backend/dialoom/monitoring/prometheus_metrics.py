"""
Prometheus metrics module for the Dialoom booking API.

Service timings are fed by the ``@measure_operation`` decorator on
``BaseService``; HTTP timings by the middleware in ``main``.
"""

from threading import Lock
from time import monotonic
from typing import Optional, cast

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Create a custom registry to avoid conflicts with default metrics
REGISTRY = CollectorRegistry()

http_request_duration_seconds = Histogram(
    "dialoom_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint", "status_code"],
    registry=REGISTRY,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

http_requests_total = Counter(
    "dialoom_http_requests_total",
    "Total number of HTTP requests",
    ["method", "endpoint", "status_code"],
    registry=REGISTRY,
)

service_operation_duration_seconds = Histogram(
    "dialoom_service_operation_duration_seconds",
    "Service operation duration in seconds",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

service_operations_total = Counter(
    "dialoom_service_operations_total",
    "Total number of service operations",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "dialoom_errors_total",
    "Total number of errors",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

booking_rejections_total = Counter(
    "dialoom_booking_rejections_total",
    "Booking requests rejected by the validation pipeline",
    ["reason"],  # host_not_found | host_not_verified | conflict | price_mismatch
    registry=REGISTRY,
)

_CACHE_TTL_SECONDS = 1.0


class PrometheusMetrics:
    """Manages Prometheus metrics collection and exposure."""

    _cache_lock: Lock = Lock()
    _cache_payload: Optional[bytes] = None
    _cache_ts: Optional[float] = None

    @staticmethod
    def record_http_request(method: str, endpoint: str, duration: float, status_code: int) -> None:
        """Record HTTP request metrics."""
        labels = {"method": method, "endpoint": endpoint, "status_code": str(status_code)}

        http_request_duration_seconds.labels(**labels).observe(duration)
        http_requests_total.labels(**labels).inc()

    @staticmethod
    def record_service_operation(
        service: str,
        operation: str,
        duration: float,
        status: str = "success",
        error_type: Optional[str] = None,
    ) -> None:
        """
        Record service operation metrics from @measure_operation decorator.

        Args:
            service: Service name (e.g., 'BookingService')
            operation: Operation/method name (e.g., 'create_booking')
            duration: Operation duration in seconds
            status: Operation status ('success' or 'error')
            error_type: Type of error if status is 'error'
        """
        service_operation_duration_seconds.labels(service=service, operation=operation).observe(
            duration
        )
        service_operations_total.labels(service=service, operation=operation, status=status).inc()

        if status == "error" and error_type:
            errors_total.labels(service=service, operation=operation, error_type=error_type).inc()

    @staticmethod
    def inc_booking_rejection(reason: str) -> None:
        booking_rejections_total.labels(reason=reason).inc()

    @staticmethod
    def get_metrics() -> bytes:
        """Generate Prometheus metrics in exposition format, cached briefly."""
        now = monotonic()
        with PrometheusMetrics._cache_lock:
            ts = PrometheusMetrics._cache_ts
            if PrometheusMetrics._cache_payload is None or ts is None or (
                now - ts
            ) > _CACHE_TTL_SECONDS:
                PrometheusMetrics._cache_payload = cast(bytes, generate_latest(REGISTRY))
                PrometheusMetrics._cache_ts = now
            return cast(bytes, PrometheusMetrics._cache_payload)

    @staticmethod
    def get_content_type() -> str:
        """Get the content type for Prometheus metrics."""
        return cast(str, CONTENT_TYPE_LATEST)


prometheus_metrics = PrometheusMetrics()
