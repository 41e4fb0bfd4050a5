# -*- coding: utf-8 -*-
"""
Tests for request accounting.
"""

from perp_broker.constants import ENDPOINT_ORDER
from perp_broker.monitoring import PerformanceMonitor


class TestPerformanceMonitor:
    """Test request metrics aggregation."""

    def test_empty_monitor(self):
        monitor = PerformanceMonitor()

        assert monitor.statistics.avg_duration_ms == 0.0
        assert monitor.get_endpoint_stats(ENDPOINT_ORDER, "POST")["count"] == 0
        assert monitor.get_error_rate() == 0.0

    def test_success_rejection_and_transport_tallies(self):
        monitor = PerformanceMonitor()
        monitor.record_request(ENDPOINT_ORDER, "POST", 10.0, status_code=200)
        monitor.record_request(ENDPOINT_ORDER, "POST", 30.0, "API_100400", 200)
        monitor.record_request(ENDPOINT_ORDER, "POST", 20.0, "HTTP_ERROR", 502)

        stats = monitor.statistics
        assert stats.total_requests == 3
        assert stats.successful_requests == 1
        assert stats.failed_requests == 2
        assert stats.rejected_requests == 1
        assert stats.error_codes == {"API_100400": 1, "HTTP_ERROR": 1}
        assert stats.last_error_code == "HTTP_ERROR"
        assert stats.avg_duration_ms == 20.0
        assert stats.max_duration_ms == 30.0

        endpoint = monitor.get_endpoint_stats(ENDPOINT_ORDER, "POST")
        assert endpoint["count"] == 3
        assert endpoint["success_rate"] == 1 / 3
        assert endpoint["error_codes"] == {"API_100400": 1, "HTTP_ERROR": 1}
        assert monitor.get_error_rate() == 2 / 3

    def test_endpoints_kept_apart(self):
        monitor = PerformanceMonitor()
        monitor.record_request(ENDPOINT_ORDER, "POST", 1.0)
        monitor.record_request(ENDPOINT_ORDER, "DELETE", 1.0, "TIMEOUT")

        assert monitor.get_endpoint_stats(ENDPOINT_ORDER, "POST")["success_rate"] == 1.0
        assert monitor.get_endpoint_stats(ENDPOINT_ORDER, "DELETE")["success_rate"] == 0.0

    def test_recorded_metrics(self):
        monitor = PerformanceMonitor()
        metrics = monitor.record_request(ENDPOINT_ORDER, "POST", 5.0, "TIMEOUT")

        assert metrics.succeeded is False
        assert metrics.rejected is False
        assert metrics.status_code is None
        assert monitor.get_recent_requests(1) == [metrics]

    def test_history_is_bounded(self):
        monitor = PerformanceMonitor(max_history=2)
        for i in range(5):
            monitor.record_request("/x", "GET", float(i))

        assert [m.duration_ms for m in monitor.get_recent_requests(10)] == [3.0, 4.0]
        assert monitor.statistics.total_requests == 5

    def test_reset(self):
        monitor = PerformanceMonitor()
        monitor.record_request("/x", "GET", 1.0)
        monitor.reset()

        assert monitor.statistics.total_requests == 0
        assert monitor.get_recent_requests() == []
        assert monitor.uptime_seconds >= 0
