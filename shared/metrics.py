"""
Shared metrics configuration for the RAWG gateway.
"""

from prometheus_client import CollectorRegistry, Counter, Histogram, Info, generate_latest
from typing import Dict, Any, Optional


class MetricsCollector:
    """Centralized metrics collector for services.

    Each collector owns its registry unless one is supplied, so several
    application instances (tests, workers) can coexist in one process.
    """

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry if registry is not None else CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up common metrics for the service."""

        self._metrics["service_info"] = Info(
            "service_info",
            "Service information",
            registry=self.registry
        )
        self._metrics["service_info"].info({
            "service": self.service_name,
            "version": "1.0.0"
        })

        # HTTP metrics
        self._metrics["http_requests_total"] = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status_code"],
            registry=self.registry
        )

        self._metrics["http_request_duration_seconds"] = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            registry=self.registry
        )

        self._metrics["errors_total"] = Counter(
            "errors_total",
            "Total errors",
            ["error_type", "service"],
            registry=self.registry
        )

        if self.service_name == "gateway":
            self._setup_gateway_metrics()

    def _setup_gateway_metrics(self):
        """Set up gateway-specific metrics."""
        self._metrics["upstream_attempts_total"] = Counter(
            "upstream_attempts_total",
            "Outbound RAWG attempts by outcome",
            ["resource", "outcome"],
            registry=self.registry
        )

        self._metrics["upstream_retry_delay_seconds"] = Histogram(
            "upstream_retry_delay_seconds",
            "Backoff delay scheduled before an upstream retry",
            buckets=(1, 2, 4, 8, 16, 32, 64),
            registry=self.registry
        )

        self._metrics["upstream_failures_total"] = Counter(
            "upstream_failures_total",
            "Upstream calls that ended in failure",
            ["classification"],
            registry=self.registry
        )

        self._metrics["admission_decisions_total"] = Counter(
            "admission_decisions_total",
            "Inbound API key checks",
            ["decision", "reason"],
            registry=self.registry
        )

    def get_metric(self, name: str):
        """Get a metric by name."""
        return self._metrics.get(name)

    def record_http_request(self, method: str, endpoint: str, status_code: int, duration: float):
        """Record HTTP request metrics."""
        self._metrics["http_requests_total"].labels(
            method=method,
            endpoint=endpoint,
            status_code=str(status_code)
        ).inc()

        self._metrics["http_request_duration_seconds"].labels(
            method=method,
            endpoint=endpoint
        ).observe(duration)

    def record_error(self, error_type: str, service: Optional[str] = None):
        """Record error metrics."""
        service_name = service or self.service_name
        self._metrics["errors_total"].labels(error_type=error_type, service=service_name).inc()

    def record_upstream_attempt(self, resource: str, outcome: str):
        self.increment_counter("upstream_attempts_total", resource=resource, outcome=outcome)

    def record_retry_delay(self, delay: float):
        if "upstream_retry_delay_seconds" in self._metrics:
            self._metrics["upstream_retry_delay_seconds"].observe(delay)

    def record_upstream_failure(self, classification: str):
        self.increment_counter("upstream_failures_total", classification=classification)

    def record_admission(self, decision: str, reason: str = "none"):
        self.increment_counter("admission_decisions_total", decision=decision, reason=reason)

    def increment_counter(self, metric_name: str, **labels):
        """Increment a counter metric."""
        if metric_name in self._metrics:
            self._metrics[metric_name].labels(**labels).inc()

    def sample_value(self, name: str, labels: Optional[Dict[str, str]] = None) -> Optional[float]:
        """Read back a sample from this collector's registry."""
        return self.registry.get_sample_value(name, labels or {})

    def export(self) -> bytes:
        """Render the registry in Prometheus text exposition format."""
        return generate_latest(self.registry)


def get_metrics_collector(service_name: str, registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get a metrics collector for a service."""
    return MetricsCollector(service_name, registry)
