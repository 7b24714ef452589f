"""
Tests for request telemetry.
"""

import threading

from shared.metrics import RequestTelemetry


def test_empty_snapshot():
    snapshot = RequestTelemetry("guidance").snapshot()
    assert snapshot == {
        "total_requests": 0,
        "total_errors": 0,
        "avg_ms": 0.0,
        "status_counts": {},
        "path_counts": {},
    }


def test_record_updates_all_counters():
    telemetry = RequestTelemetry("guidance")
    telemetry.record("GET", "/healthz", 200, 0.010)
    telemetry.record("POST", "/tools/search_guidance", 503, 0.030)
    telemetry.record("POST", "/tools/search_guidance", 400, 0.020)

    snapshot = telemetry.snapshot()

    assert snapshot["total_requests"] == 3
    assert snapshot["total_errors"] == 2
    assert snapshot["avg_ms"] == 20.0
    assert list(snapshot["status_counts"].items()) == [("200", 1), ("400", 1), ("503", 1)]
    assert list(snapshot["path_counts"].items()) == [("/tools/search_guidance", 2), ("/healthz", 1)]


def test_instances_do_not_share_state():
    first = RequestTelemetry("guidance")
    second = RequestTelemetry("guidance")
    first.record("GET", "/healthz", 200, 0.001)

    assert second.snapshot()["total_requests"] == 0


def test_concurrent_records_are_not_lost():
    telemetry = RequestTelemetry("guidance")

    def worker():
        for _ in range(500):
            telemetry.record("GET", "/healthz", 200, 0.001)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    snapshot = telemetry.snapshot()
    assert snapshot["total_requests"] == 4000
    assert snapshot["path_counts"]["/healthz"] == 4000


def test_prometheus_rendering():
    telemetry = RequestTelemetry("guidance")
    telemetry.record("POST", "/tools/force_refresh", 404, 0.002, endpoint="/tools/force_refresh")

    text = telemetry.render_prometheus().decode()

    assert "http_requests_total" in text
    assert telemetry.registry.get_sample_value(
        "service_info", {"service": "guidance", "version": "1.0.0"}
    ) == 1.0
    assert telemetry.registry.get_sample_value(
        "http_request_errors_total", {"endpoint": "/tools/force_refresh"}
    ) == 1.0


def test_unmatched_paths_share_one_label():
    telemetry = RequestTelemetry("guidance")
    for path in ("/wp-admin", "/.env", "/random/123"):
        telemetry.record("GET", path, 404, 0.001)

    assert telemetry.registry.get_sample_value(
        "http_requests_total", {"method": "GET", "endpoint": "unmatched", "status_code": "404"}
    ) == 3.0
    assert telemetry.registry.get_sample_value(
        "http_requests_total", {"method": "GET", "endpoint": "/wp-admin", "status_code": "404"}
    ) is None
    assert telemetry.snapshot()["path_counts"]["/wp-admin"] == 1
