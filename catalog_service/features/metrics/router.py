"""Prometheus scrape endpoint.

Endpoints:
    GET /metrics - Prometheus text exposition of the service registry

Metrics Exposed:
    - cache_hits_total / cache_misses_total - hit ratio per backend
    - cache_operation_duration_seconds - adapter latency per operation
    - cache_invalidations_total - keys removed by bulk invalidation
    - pagination_queries_total - keyset queries per model and sort mode
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST

from catalog_service.infra.metrics import REGISTRY, generate_latest

router = APIRouter(tags=["observability"])


@router.get("/metrics")
async def metrics() -> Response:
    """Expose the cache and pagination metrics for scraping.

    Counters and histograms carry trace-id exemplars when recorded inside
    an active span.
    """
    data = generate_latest(REGISTRY)
    return Response(
        content=data,
        media_type=CONTENT_TYPE_LATEST,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"},
    )
