"""
Prometheus metrics module for EduVibe.

Service-level counters and histograms fed by the @measure_operation
decorator, plus domain counters for matching and session lifecycle events.
"""

from typing import Optional

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Histogram, generate_latest

# Create a custom registry to avoid conflicts with default metrics
REGISTRY = CollectorRegistry()

service_operation_duration_seconds = Histogram(
    "eduvibe_service_operation_duration_seconds",
    "Service operation duration in seconds",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

service_operations_total = Counter(
    "eduvibe_service_operations_total",
    "Total number of service operations",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "eduvibe_errors_total",
    "Total number of errors",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

session_transitions_total = Counter(
    "eduvibe_session_transitions_total",
    "Session lifecycle events applied",
    ["event", "outcome"],
    registry=REGISTRY,
)

match_candidates_scored = Histogram(
    "eduvibe_match_candidates_scored",
    "Number of mentor candidates scored per match request",
    registry=REGISTRY,
    buckets=(0, 1, 5, 10, 25, 50, 100, 250),
)


class PrometheusMetrics:
    """Manages Prometheus metrics collection and exposure."""

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
            service: Service name (e.g., 'SessionService')
            operation: Operation/method name (e.g., 'create_session')
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
    def record_session_transition(event: str, outcome: str) -> None:
        """Count an applied ('success') or rejected ('rejected') lifecycle event."""
        session_transitions_total.labels(event=event, outcome=outcome).inc()

    @staticmethod
    def observe_match_pool(size: int) -> None:
        match_candidates_scored.observe(size)

    @staticmethod
    def get_metrics() -> bytes:
        """Generate Prometheus metrics in exposition format."""
        return generate_latest(REGISTRY)

    @staticmethod
    def get_content_type() -> str:
        return CONTENT_TYPE_LATEST


prometheus_metrics = PrometheusMetrics()
