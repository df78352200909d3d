"""Prometheus metrics for monitoring.

Tracks request latency, insights generation duration and the
classification outcomes of each scan.
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram, Info

# Application info
APP_INFO = Info("ri_app", "Repo Insights application info")

# HTTP metrics
HTTP_REQUESTS_TOTAL = Counter(
    "ri_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

HTTP_REQUEST_DURATION = Histogram(
    "ri_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# Insights engine metrics
INSIGHTS_DURATION = Histogram(
    "ri_insights_duration_seconds",
    "Insights generation duration",
)

REPOSITORIES_ANALYZED = Counter(
    "ri_repositories_analyzed_total",
    "Repository snapshots folded into insights",
)

TECHNOLOGIES_DETECTED = Counter(
    "ri_technologies_detected_total",
    "Technologies detected per category",
    ["category"],
)

EXPERIENCE_LEVELS_ASSIGNED = Counter(
    "ri_experience_levels_assigned_total",
    "Language experience levels assigned",
    ["level"],
)
