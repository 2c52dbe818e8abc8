"""
Prometheus metrics for monitoring
"""
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# ==================== HTTP Metrics ====================

http_requests_total = Counter(
    "bidwell_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "bidwell_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
)

# ==================== Bid Metrics ====================

bids_placed_total = Counter(
    "bidwell_bids_placed_total",
    "Total bids accepted",
)

bids_rejected_total = Counter(
    "bidwell_bids_rejected_total",
    "Total bids rejected",
    ["reason"],  # too_low, closed, invalid, not_found
)

bid_acceptance_duration_seconds = Histogram(
    "bidwell_bid_acceptance_duration_seconds",
    "Time to accept or reject a bid",
    buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
)

# ==================== Auth Metrics ====================

auth_attempts_total = Counter(
    "bidwell_auth_attempts_total",
    "Login and signup attempts",
    ["action", "outcome"],
)


def metrics_payload():
    """Body and content type for the /metrics endpoint"""
    return generate_latest(), CONTENT_TYPE_LATEST
