"""
Request telemetry for the guidance gateway.

Counters are owned by a ``RequestTelemetry`` instance created once per
service and handed to the request middleware; there is no module-level
state. Two views are exposed: a JSON snapshot and a Prometheus text
exposition for scraping.
"""

import threading
from collections import Counter as TallyCounter
from typing import Any, Dict, Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    Info,
    generate_latest,
)

PROMETHEUS_CONTENT_TYPE = CONTENT_TYPE_LATEST
UNMATCHED_ENDPOINT = "unmatched"


class RequestTelemetry:
    """Process-wide request counters guarded by a single lock."""

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry or CollectorRegistry()
        self._lock = threading.Lock()
        self._total_requests = 0
        self._total_errors = 0
        self._total_ms = 0.0
        self._path_counts: TallyCounter = TallyCounter()
        self._status_counts: TallyCounter = TallyCounter()
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up Prometheus metrics in this instance's registry."""
        self._metrics["service_info"] = Info(
            "service",
            "Service information",
            registry=self.registry
        )
        self._metrics["service_info"].info({
            "service": self.service_name,
            "version": "1.0.0"
        })

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

        self._metrics["http_request_errors_total"] = Counter(
            "http_request_errors_total",
            "Total HTTP requests answered with status >= 400",
            ["endpoint"],
            registry=self.registry
        )

    def record(
        self,
        method: str,
        path: str,
        status_code: int,
        duration: float,
        endpoint: Optional[str] = None,
    ) -> None:
        """Record the outcome of one inbound request.

        ``endpoint`` is the matched route template used as the Prometheus
        label; requests no route handled share the ``unmatched`` label.
        """
        is_error = status_code >= 400
        endpoint = endpoint or UNMATCHED_ENDPOINT
        with self._lock:
            self._total_requests += 1
            self._total_ms += duration * 1000.0
            self._path_counts[path or "/"] += 1
            self._status_counts[status_code] += 1
            if is_error:
                self._total_errors += 1

        self._metrics["http_requests_total"].labels(
            method=method,
            endpoint=endpoint,
            status_code=str(status_code)
        ).inc()
        self._metrics["http_request_duration_seconds"].labels(
            method=method,
            endpoint=endpoint
        ).observe(duration)
        if is_error:
            self._metrics["http_request_errors_total"].labels(endpoint=endpoint).inc()

    def snapshot(self) -> Dict[str, Any]:
        """Return a consistent read-only view of the counters."""
        with self._lock:
            total = self._total_requests
            errors = self._total_errors
            total_ms = self._total_ms
            status_counts = dict(self._status_counts)
            path_counts = dict(self._path_counts)

        avg_ms = round(total_ms / total, 2) if total else 0.0
        return {
            "total_requests": total,
            "total_errors": errors,
            "avg_ms": avg_ms,
            "status_counts": {
                str(status): count for status, count in sorted(status_counts.items())
            },
            "path_counts": {
                path: count
                for path, count in sorted(path_counts.items(), key=lambda item: (-item[1], item[0]))
            },
        }

    def render_prometheus(self) -> bytes:
        """Render the registry in the Prometheus text exposition format."""
        return generate_latest(self.registry)
