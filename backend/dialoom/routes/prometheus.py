"""
Prometheus metrics endpoint for monitoring infrastructure.

This is a PUBLIC endpoint (no authentication required) following
standard Prometheus practices. It exposes metrics collected by the HTTP
middleware and the @measure_operation decorators on services.
"""

from fastapi import APIRouter, Response
from prometheus_client import Counter

from ..monitoring.prometheus_metrics import REGISTRY, prometheus_metrics

router = APIRouter()

_scrape_counter = Counter(
    "dialoom_prometheus_scrapes_total",
    "Total number of Prometheus metrics scrapes",
    registry=REGISTRY,
)


@router.get(
    "/metrics/prometheus", include_in_schema=False, response_class=Response, response_model=None
)
async def get_prometheus_metrics() -> Response:
    """
    Expose Prometheus metrics for scraping.

    Returns:
        Response with Prometheus exposition format (text/plain)
    """
    _scrape_counter.inc()
    return Response(
        content=prometheus_metrics.get_metrics(),
        media_type=prometheus_metrics.get_content_type(),
        headers={
            "Cache-Control": "no-cache, no-store, must-revalidate",
            "Pragma": "no-cache",
            "Expires": "0",
        },
    )
