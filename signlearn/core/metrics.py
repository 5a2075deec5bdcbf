"""Prometheus metric inventory.

All metrics are defined here; modules import the one they own and
increment/observe it at the point of action.  HTTP metrics are fed by
MetricsMiddleware, domain metrics by the services in signlearn/services/.

Domain counters mirror the denormalized analytics blocks on
Course/Package: if ``enrollments_total`` and the sum of package enrollment
counters drift apart, the store lost an increment.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by the MetricsMiddleware)
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Consistency engine
# ---------------------------------------------------------------------------

ENROLLMENTS = Counter(
    "enrollments_total",
    "Enroll calls by outcome",
    ["result"],  # "new" or "repeat"
)

PROGRESS_UPDATES = Counter(
    "progress_updates_total",
    "RecordProgress calls by resulting status",
    ["status"],  # not_started|in_progress|completed
)

COMPLETIONS = Counter(
    "course_completions_total",
    "ProgressRecord transitions into completed",
)

PARTIAL_OUTCOMES = Counter(
    "partial_outcomes_total",
    "Counter increments that failed after the primary write succeeded",
    ["step"],  # "user_completions" or "course_completions"
)

VIEWS = Counter(
    "catalog_views_total",
    "Detail fetches recorded as views",
    ["kind"],  # "course" or "package"
)

# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------

LOGIN_ATTEMPTS = Counter(
    "login_attempts_total",
    "Login attempts by result",
    ["result"],  # "success" or "failure"
)
