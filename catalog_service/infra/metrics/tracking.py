"""Helper functions for tracking cache and pagination metrics."""

from __future__ import annotations

from opentelemetry import trace

from catalog_service.infra.metrics.prometheus import (
    cache_hits_total,
    cache_invalidations_total,
    cache_misses_total,
    cache_operation_duration_seconds,
    pagination_queries_total,
)


def _current_trace_id() -> str | None:
    """Return the active trace id as a 32-char hex string, if any."""
    span = trace.get_current_span()
    if span and span.get_span_context().is_valid:
        return format(span.get_span_context().trace_id, "032x")
    return None


# ============================================================================
# Cache Tracking
# ============================================================================


def track_cache_lookup(cache_name: str, *, hit: bool) -> None:
    """Record a cache hit or miss, linked to the active trace.

    Args:
        cache_name: Backend label (e.g. "memory", "redis")
        hit: Whether the lookup found a live entry

    Example:
        track_cache_lookup("redis", hit=value is not None)
    """
    counter = cache_hits_total if hit else cache_misses_total
    trace_id = _current_trace_id()
    if trace_id:
        counter.labels(cache_name=cache_name).inc(exemplar={"trace_id": trace_id})
    else:
        counter.labels(cache_name=cache_name).inc()


def track_cache_operation(cache_name: str, operation: str, duration: float) -> None:
    """Observe the duration of a cache operation.

    Args:
        cache_name: Backend label
        operation: Operation name (get, set, delete, keys, invalidate_prefix)
        duration: Elapsed time in seconds
    """
    histogram = cache_operation_duration_seconds.labels(
        operation=operation,
        cache_name=cache_name,
    )
    trace_id = _current_trace_id()
    if trace_id:
        histogram.observe(duration, exemplar={"trace_id": trace_id})
    else:
        histogram.observe(duration)


def track_cache_invalidation(cache_name: str, count: int) -> None:
    """Count keys removed by bulk invalidation."""
    if count > 0:
        cache_invalidations_total.labels(cache_name=cache_name).inc(count)


# ============================================================================
# Pagination Tracking
# ============================================================================


def track_pagination_query(model: str, sort_mode: str) -> None:
    """Count a keyset pagination query.

    Args:
        model: ORM model name (e.g. "Icon")
        sort_mode: "field" or "relevance"
    """
    pagination_queries_total.labels(model=model, sort_mode=sort_mode).inc()
