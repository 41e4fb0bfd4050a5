"""
Request accounting for the broker facade.

Every facade call is recorded once, with its latency and, for failures,
the ``BrokerError`` code it raised. Exchange rejections (``API_<code>``)
are tallied separately from transport-level failures so a burst of
rate-limit or margin rejections is visible without log scraping.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from collections import Counter, defaultdict, deque

API_ERROR_PREFIX = "API_"


@dataclass(frozen=True)
class RequestMetrics:
    """One facade call as seen by the monitor."""
    endpoint: str
    method: str
    duration_ms: float
    timestamp: float
    error_code: Optional[str] = None
    status_code: Optional[int] = None  # None when no HTTP response arrived

    @property
    def succeeded(self) -> bool:
        return self.error_code is None

    @property
    def rejected(self) -> bool:
        """Exchange answered but refused the request."""
        return self.error_code is not None and self.error_code.startswith(API_ERROR_PREFIX)


@dataclass
class Statistics:
    """Aggregate counters since the monitor was created or reset."""
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    rejected_requests: int = 0
    total_duration_ms: float = 0.0
    max_duration_ms: float = 0.0
    error_codes: Counter = field(default_factory=Counter)
    last_error_code: Optional[str] = None

    @property
    def avg_duration_ms(self) -> float:
        if not self.total_requests:
            return 0.0
        return self.total_duration_ms / self.total_requests

    def update(self, metrics: RequestMetrics) -> None:
        self.total_requests += 1
        self.total_duration_ms += metrics.duration_ms
        self.max_duration_ms = max(self.max_duration_ms, metrics.duration_ms)

        if metrics.succeeded:
            self.successful_requests += 1
            return

        self.failed_requests += 1
        self.error_codes[metrics.error_code] += 1
        self.last_error_code = metrics.error_code
        if metrics.rejected:
            self.rejected_requests += 1


class PerformanceMonitor:
    """Keeps bounded per-endpoint history plus running totals."""

    def __init__(self, max_history: int = 1000):
        self._max_history = max_history
        self._statistics = Statistics()
        self._history: deque = deque(maxlen=max_history)
        self._by_endpoint: Dict[str, deque] = defaultdict(lambda: deque(maxlen=max_history))
        self._start_time = time.time()

    def record_request(
        self,
        endpoint: str,
        method: str,
        duration_ms: float,
        error_code: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> RequestMetrics:
        """Record one finished call.

        Args:
            endpoint: Exchange path the call targeted
            method: HTTP method
            duration_ms: Wall time including mapping and normalization
            error_code: ``BrokerError.code`` when the call failed
            status_code: HTTP status when a response was received
        """
        metrics = RequestMetrics(
            endpoint=endpoint,
            method=method,
            duration_ms=duration_ms,
            timestamp=time.time(),
            error_code=error_code,
            status_code=status_code,
        )

        self._statistics.update(metrics)
        self._history.append(metrics)
        self._by_endpoint[f"{method} {endpoint}"].append(metrics)
        return metrics

    @property
    def statistics(self) -> Statistics:
        return self._statistics

    @property
    def uptime_seconds(self) -> float:
        return time.time() - self._start_time

    def get_endpoint_stats(self, endpoint: str, method: str) -> Dict[str, Any]:
        """Summarize the retained history of one endpoint."""
        requests = self._by_endpoint.get(f"{method} {endpoint}")

        if not requests:
            return {
                "count": 0,
                "avg_duration_ms": 0.0,
                "max_duration_ms": 0.0,
                "success_rate": 0.0,
                "error_codes": {},
            }

        durations = [r.duration_ms for r in requests]
        failures = Counter(r.error_code for r in requests if not r.succeeded)

        return {
            "count": len(requests),
            "avg_duration_ms": sum(durations) / len(durations),
            "max_duration_ms": max(durations),
            "success_rate": (len(requests) - sum(failures.values())) / len(requests),
            "error_codes": dict(failures),
        }

    def get_recent_requests(self, count: int = 10) -> List[RequestMetrics]:
        return list(self._history)[-count:]

    def get_error_rate(self, window_seconds: float = 60.0) -> float:
        """Share of failed calls among those recorded in the last window."""
        cutoff = time.time() - window_seconds
        recent = [r for r in self._history if r.timestamp >= cutoff]

        if not recent:
            return 0.0
        return sum(1 for r in recent if not r.succeeded) / len(recent)

    def reset(self) -> None:
        self._statistics = Statistics()
        self._history.clear()
        self._by_endpoint.clear()
        self._start_time = time.time()
