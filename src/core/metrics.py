"""Prometheus metrics for the card decision engine.

Metrics are organized into two categories:

Business Metrics (for Credit Risk/Product):
- card_decision_total: Decisions by outcome and risk level
- card_hard_stop_total: Hard stops by rule
- card_credit_limit_assigned_total: Assigned limits by card type
- card_pass_rate: Running share of PASS and CONDITIONAL PASS decisions
- card_avg_credit_limit_pkr: Average assigned limit

Technical Metrics (for Engineering/SRE):
- card_decision_latency_seconds: Evaluation latency
- card_validation_failures_total: Rejected payloads
- card_http_requests_total: HTTP requests by endpoint/status
"""

import threading
import time
from contextlib import contextmanager
from typing import Generator, Optional

from prometheus_client import Counter, Histogram, Gauge, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Business Metrics (Credit Risk/Product dashboards)
# =============================================================================

decision_total = Counter(
    "card_decision_total",
    "Total number of card decisions made",
    ["decision", "risk_level"],
)

hard_stop_total = Counter(
    "card_hard_stop_total",
    "Applications failed by a hard-stop rule",
    ["rule"],  # AGE, SPU, ANNEXURE_A, DBR, COMPLIANCE
)

credit_limit_assigned = Counter(
    "card_credit_limit_assigned_total",
    "Credit limits assigned by card type",
    ["card_type"],
)

pass_rate_gauge = Gauge(
    "card_pass_rate",
    "Running share of applications that were not failed (0.0-1.0)",
)

avg_credit_limit_gauge = Gauge(
    "card_avg_credit_limit_pkr",
    "Average assigned credit limit in PKR",
)

# Running totals for the gauges
_lock = threading.Lock()
_total_count = 0
_passed_count = 0
_limit_count = 0
_limit_sum = 0


# =============================================================================
# Technical Metrics (Engineering/SRE dashboards)
# =============================================================================

decision_latency = Histogram(
    "card_decision_latency_seconds",
    "Decision evaluation latency in seconds",
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)

validation_failures = Counter(
    "card_validation_failures_total",
    "Application payloads rejected by validation",
)

http_requests_total = Counter(
    "card_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "card_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_decision(
    decision: str,
    risk_level: str,
    credit_limit: Optional[int] = None,
    card_type: Optional[str] = None,
) -> None:
    """Record a decision in metrics."""
    global _total_count, _passed_count, _limit_count, _limit_sum

    decision_total.labels(decision=decision, risk_level=risk_level).inc()
    if card_type:
        credit_limit_assigned.labels(card_type=card_type).inc()

    with _lock:
        _total_count += 1
        if decision != "FAIL":
            _passed_count += 1
        if credit_limit:
            _limit_count += 1
            _limit_sum += credit_limit

        pass_rate_gauge.set(_passed_count / _total_count)
        if _limit_count > 0:
            avg_credit_limit_gauge.set(_limit_sum / _limit_count)


def record_hard_stop(rule: str) -> None:
    """Record a hard-stop failure."""
    hard_stop_total.labels(rule=rule).inc()


def record_validation_failure() -> None:
    validation_failures.inc()


@contextmanager
def track_decision_latency() -> Generator[None, None, None]:
    """Context manager to track decision latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        decision_latency.observe(duration)


def record_http_request(method: str, endpoint: str, status: int, duration: float) -> None:
    """Record an HTTP request."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=str(status)).inc()
    http_request_latency.labels(method=method, endpoint=endpoint).observe(duration)


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST
