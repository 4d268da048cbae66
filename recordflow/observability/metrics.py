"""
Prometheus metrics collection for recordflow

This module provides metrics instrumentation for monitoring
pipeline runs and record throughput.
"""
import os

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Package-local registry, kept off the process-wide default
REGISTRY = CollectorRegistry()


# =======================
# PIPELINE METRICS
# =======================

records_read_total = Counter(
    name="recordflow_records_read_total",
    documentation="Total number of records pulled from sources",
    labelnames=["pipeline"],
    registry=REGISTRY,
)

records_written_total = Counter(
    name="recordflow_records_written_total",
    documentation="Total number of records written to sinks",
    labelnames=["pipeline"],
    registry=REGISTRY,
)

transform_empty_outputs_total = Counter(
    name="recordflow_transform_empty_outputs_total",
    documentation="Transform invocations that produced no output record",
    labelnames=["pipeline", "transform"],
    registry=REGISTRY,
)

runs_total = Counter(
    name="recordflow_runs_total",
    documentation="Pipeline runs by final status",
    labelnames=["pipeline", "status"],  # status: completed, failed
    registry=REGISTRY,
)

run_duration_seconds = Histogram(
    name="recordflow_run_duration_seconds",
    documentation="Wall-clock duration of pipeline runs in seconds",
    labelnames=["pipeline"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0, 300.0],
    registry=REGISTRY,
)


def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics in text format

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def start_metrics_server(port: int | None = None) -> None:
    """
    Start HTTP server for Prometheus metrics

    Args:
        port: Port to listen on (defaults to env var METRICS_PORT or 8000)
    """
    # Lazy import: the HTTP server is only needed when the endpoint is enabled
    from prometheus_client import start_http_server

    metrics_port = port or int(os.getenv("METRICS_PORT", "8000"))
    start_http_server(metrics_port, registry=REGISTRY)


def increment_counter(counter: Counter, value: float = 1.0, **labels) -> None:
    counter.labels(**labels).inc(value)


def observe_histogram(histogram: Histogram, value: float, **labels) -> None:
    histogram.labels(**labels).observe(value)


# =======================
# METRICS COLLECTOR CLASS
# =======================

class MetricsCollector:
    """
    Metrics facade bound to one pipeline name.

    The pipeline driver reports through this object so the label values
    stay consistent across a run.
    """

    def __init__(self, pipeline_name: str = "default"):
        self.pipeline_name = pipeline_name

    def record_read(self, count: int = 1) -> None:
        increment_counter(records_read_total, count, pipeline=self.pipeline_name)

    def record_written(self, count: int = 1) -> None:
        increment_counter(records_written_total, count, pipeline=self.pipeline_name)

    def record_empty_output(self, transform_name: str) -> None:
        increment_counter(
            transform_empty_outputs_total, 1, pipeline=self.pipeline_name, transform=transform_name
        )

    def record_run(self, status: str, duration_seconds: float) -> None:
        """
        Record the end of a pipeline run.

        Args:
            status: "completed" or "failed"
            duration_seconds: Time taken by the run
        """
        increment_counter(runs_total, 1, pipeline=self.pipeline_name, status=status)
        observe_histogram(run_duration_seconds, duration_seconds, pipeline=self.pipeline_name)
