"""Prometheus metrics for monitoring"""
from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry
import time
from functools import wraps
from typing import Callable

registry = CollectorRegistry()

request_count = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status'],
    registry=registry
)

request_duration = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    registry=registry
)

quote_calculations = Counter(
    'quote_calculations_total',
    'Total quote and quote line calculations',
    ['domain', 'kind'],
    registry=registry
)

calculation_duration = Histogram(
    'quote_calculation_duration_seconds',
    'Quote calculation duration in seconds',
    ['kind'],
    registry=registry
)

tier_fallbacks = Counter(
    'pricing_tier_fallbacks_total',
    'Day counts that matched no pricing tier and used the fallback price',
    ['domain', 'reason'],
    registry=registry
)

tier_data_warnings = Counter(
    'pricing_tier_data_warnings_total',
    'Catalog tier lists flagged for data-quality review',
    ['kind'],
    registry=registry
)

cache_hits = Counter(
    'cache_hits_total',
    'Total cache hits',
    ['cache'],
    registry=registry
)

cache_misses = Counter(
    'cache_misses_total',
    'Total cache misses',
    ['cache'],
    registry=registry
)

redis_connected = Gauge(
    'redis_connected',
    'Redis connection status (1=connected, 0=disconnected)',
    registry=registry
)


def track_calculation(kind: str):
    """Decorator to time engine calculations"""
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                return func(*args, **kwargs)
            finally:
                calculation_duration.labels(kind=kind).observe(time.time() - start_time)
        return wrapper
    return decorator


def get_metrics_text() -> str:
    """Generate Prometheus metrics in text format"""
    from prometheus_client import generate_latest
    return generate_latest(registry).decode('utf-8')
