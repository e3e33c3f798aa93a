"""
Prometheus metrics collection for condition-log

This module provides metrics instrumentation for submissions,
validation failures and sink writes.
"""
from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Private registry so importing the package never touches the global one
REGISTRY = CollectorRegistry()


# =======================
# SUBMISSION METRICS
# =======================

submissions_total = Counter(
    name="condition_log_submissions_total",
    documentation="Total number of persist calls by terminal outcome",
    labelnames=["outcome"],  # persisted, rejected, persist_failed
    registry=REGISTRY,
)

validation_failures_total = Counter(
    name="condition_log_validation_failures_total",
    documentation="Total number of field validation failures",
    labelnames=["field_name", "rule_type"],
    registry=REGISTRY,
)

# =======================
# SINK METRICS
# =======================

sink_writes_total = Counter(
    name="condition_log_sink_writes_total",
    documentation="Total number of sink write attempts",
    labelnames=["sink", "status"],  # status: success, error
    registry=REGISTRY,
)

sink_write_duration_seconds = Histogram(
    name="condition_log_sink_write_duration_seconds",
    documentation="Time spent writing one record to a sink",
    labelnames=["sink"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
    registry=REGISTRY,
)

json_documents_replaced_total = Counter(
    name="condition_log_json_documents_replaced_total",
    documentation="Malformed JSON documents replaced by a fresh array",
    registry=REGISTRY,
)


def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics in text format

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


class track_duration:
    """
    Context manager for tracking operation duration

    Usage:
        with track_duration(sink_write_duration_seconds, sink="csv"):
            # do work
            pass
    """

    def __init__(self, histogram: Histogram, **labels):
        self.histogram = histogram
        self.labels = labels
        self.timer = None

    def __enter__(self):
        """Start timer"""
        self.timer = self.histogram.labels(**self.labels).time()
        self.timer.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Stop timer"""
        self.timer.__exit__(exc_type, exc_val, exc_tb)
        return False


def record_submission(outcome: str) -> None:
    submissions_total.labels(outcome=outcome).inc()


def record_validation_failures(failed_rules: dict[str, str]) -> None:
    """
    Record one failure per rejected field.

    Args:
        failed_rules: Field name -> type of the rule that rejected it
    """
    for field_name, rule_type in failed_rules.items():
        validation_failures_total.labels(field_name=field_name, rule_type=rule_type).inc()


def record_sink_write(sink: str, success: bool) -> None:
    sink_writes_total.labels(sink=sink, status="success" if success else "error").inc()


def record_json_replacement() -> None:
    json_documents_replaced_total.inc()
