"""
Prometheus metrics for request monitoring and goal store operations.

Each application gets its own registry so several apps (tests, workers)
can live in one process without duplicate-collector errors.
"""

from prometheus_client import CollectorRegistry, Counter, Histogram, start_http_server


class AppMetrics:
    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry or CollectorRegistry()

        # Request metrics - labeled by method, route and status
        self.http_requests = Counter(
            "http_requests_total",
            "Total number of HTTP requests",
            ["method", "path", "status_code"],
            registry=self.registry,
        )
        self.http_request_duration = Histogram(
            "http_request_duration_seconds",
            "Duration of HTTP requests in seconds",
            ["method", "path", "status_code"],
            buckets=(0.1, 0.3, 0.5, 0.7, 1, 3, 5, 7, 10),
            registry=self.registry,
        )

        # Store metrics
        self.goal_operations = Counter(
            "goal_operations_total",
            "Total number of goal operations",
            ["operation", "status"],
            registry=self.registry,
        )
        self.database_query_duration = Histogram(
            "database_query_duration_seconds",
            "Duration of database queries in seconds",
            ["query_type"],
            buckets=(0.01, 0.05, 0.1, 0.5, 1, 2, 5),
            registry=self.registry,
        )

    def observe_request(self, method: str, path: str, status_code: int, duration: float) -> None:
        labels = {"method": method, "path": path, "status_code": str(status_code)}
        self.http_requests.labels(**labels).inc()
        self.http_request_duration.labels(**labels).observe(duration)

    def observe_operation(self, operation: str, status: str, duration: float) -> None:
        self.goal_operations.labels(operation=operation, status=status).inc()
        self.database_query_duration.labels(query_type=operation).observe(duration)

    def start_exporter(self, port: int) -> None:
        """Serve this registry on its own port."""
        start_http_server(port, registry=self.registry)
