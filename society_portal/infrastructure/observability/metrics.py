"""Prometheus metrics for billing, payments, approvals and change-event delivery"""

from prometheus_client import Counter, Histogram

# Billing metrics
bills_generated_counter = Counter(
    "society_bills_generated_total",
    "Bills created by monthly generation runs",
)

payments_counter = Counter(
    "society_payments_total",
    "Bill payments recorded",
    ["method", "recorded_by"],  # recorded_by: admin | member
)

approval_counter = Counter(
    "society_member_decisions_total",
    "Membership approval decisions",
    ["outcome"],  # approved | rejected
)

# Data service metrics
data_service_failures_counter = Counter(
    "data_service_failures_total",
    "Failed calls to the relational store",
)

# Change event webhook metrics
webhook_latency_histogram = Histogram(
    "change_webhook_latency_seconds",
    "Change event webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

webhook_failure_counter = Counter(
    "change_webhook_failures_total",
    "Failed change event deliveries",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_bill_generation(created: int) -> None:
    bills_generated_counter.inc(created)


def record_payment(method: str, recorded_by: str) -> None:
    payments_counter.labels(method=method, recorded_by=recorded_by).inc()


def record_decision(approved: bool) -> None:
    """Record membership decision for monitoring approval rates"""
    outcome = "approved" if approved else "rejected"
    approval_counter.labels(outcome=outcome).inc()
