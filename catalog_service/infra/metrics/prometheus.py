"""Prometheus collectors for the catalog cache and keyset pagination.

All collectors register on a private ``REGISTRY`` rather than the global
default, so ``/metrics`` exposes exactly these series and tests can read
them back with ``REGISTRY.get_sample_value``. Record through the helpers
in ``tracking`` rather than touching collectors directly.
"""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Histogram

REGISTRY = CollectorRegistry()

# 1ms (memory hit) .. 10s (Redis retries exhausted)
CACHE_LATENCY_BUCKETS = (0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)

# ──────────────────────────────────────────────────────────────
# Cache adapters (label: adapter name, "memory" or "redis")
# ──────────────────────────────────────────────────────────────

cache_hits_total = Counter(
    "cache_hits_total",
    "Adapter lookups that found a live entry",
    ["cache_name"],
    registry=REGISTRY,
)
cache_misses_total = Counter(
    "cache_misses_total",
    "Adapter lookups that found nothing or an expired entry",
    ["cache_name"],
    registry=REGISTRY,
)
cache_operation_duration_seconds = Histogram(
    "cache_operation_duration_seconds",
    "Adapter operation latency (get, set, delete, keys, invalidate_prefix)",
    ["operation", "cache_name"],
    buckets=CACHE_LATENCY_BUCKETS,
    registry=REGISTRY,
)
cache_invalidations_total = Counter(
    "cache_invalidations_total",
    "Keys removed by prefix or predicate invalidation",
    ["cache_name"],
    registry=REGISTRY,
)

# ──────────────────────────────────────────────────────────────
# Keyset pagination
# ──────────────────────────────────────────────────────────────

pagination_queries_total = Counter(
    "pagination_queries_total",
    "Keyset page queries by model and sort mode (field or relevance)",
    ["model", "sort_mode"],
    registry=REGISTRY,
)
