"""Prometheus metrics for record activity, trip profitability and provider health"""

from prometheus_client import Counter, Histogram

# Record metrics
earnings_records_counter = Counter(
    "ride_ledger_earnings_records_total",
    "Earnings records saved",
)

service_records_counter = Counter(
    "ride_ledger_service_records_total",
    "Maintenance services registered",
    ["service_type"],
)

trip_analysis_counter = Counter(
    "ride_ledger_trip_analysis_total",
    "Trip profitability analyses by tier",
    ["profitability"],  # profitable | marginal | unprofitable
)

# Provider metrics
routing_failures_counter = Counter(
    "routing_failures_total",
    "Failed geocoding/directions calls",
    ["operation"],
)

auth_failures_counter = Counter(
    "auth_failures_total",
    "Failed auth provider calls",
    ["operation"],
)

routing_latency_histogram = Histogram(
    "routing_latency_seconds",
    "Directions API response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_trip_analysis(profitability: str) -> None:
    trip_analysis_counter.labels(profitability=profitability).inc()
