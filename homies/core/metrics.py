"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Controller outcomes
event_actions = Counter(
    'event_actions_total',
    'Event controller actions by outcome',
    ['action', 'result']  # add/edit/join/leave, success/invalid/not_found/forbidden/noop
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get, hit/miss
)


def metrics_endpoint() -> Response:
    """Render all registered metrics in the Prometheus text format."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_event_action(action: str, result: str):
    """Record an event controller outcome."""
    event_actions.labels(action=action, result=result).inc()


def record_cache_operation(operation: str, hit: bool):
    """Record cache operation."""
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()
