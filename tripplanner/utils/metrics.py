"""Prometheus metrics for HTTP requests and budget aggregation."""

from prometheus_client import Counter, Histogram

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "route", "status"],
)

http_request_latency_ms = Histogram(
    "http_request_latency_ms",
    "HTTP request latency in milliseconds",
    ["method", "route"],
    buckets=[5, 10, 25, 50, 100, 250, 500, 1000, 2500],
)

budget_computations_total = Counter(
    "budget_computations_total",
    "Total trip budget aggregations",
    ["source"],
)


class PrometheusRequestMetrics:
    """Prometheus-based request metrics implementation."""

    def record_request(self, method: str, route: str, status_code: int, latency_ms: float) -> None:
        """Record request count and latency."""
        http_requests_total.labels(method=method, route=route, status=str(status_code)).inc()
        http_request_latency_ms.labels(method=method, route=route).observe(latency_ms)

    def inc_budget(self, source: str) -> None:
        """Increment budget aggregation counter."""
        budget_computations_total.labels(source=source).inc()


request_metrics = PrometheusRequestMetrics()
