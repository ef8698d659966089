"""Prometheus metrics for monitoring."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# HTTP Request metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

http_requests_in_progress = Gauge(
    "http_requests_in_progress",
    "Number of HTTP requests in progress",
    ["method", "endpoint"],
)

# Upstream (DominioDZ) metrics
upstream_requests_total = Counter(
    "upstream_requests_total",
    "Total DominioDZ procedure calls",
    ["opcion", "status"],  # status: ok, error, http code
)

upstream_duration_seconds = Histogram(
    "upstream_duration_seconds",
    "DominioDZ call duration",
    ["opcion"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

range_fetch_failures_total = Counter(
    "range_fetch_failures_total",
    "Date-range sales fetches that failed and contributed zero records",
    ["period"],  # period: last3, same_month_last_year, current_month, pricing
)

# Business metrics
suggestions_generated_total = Counter(
    "suggestions_generated_total",
    "Order suggestion rows produced",
    ["endpoint"],
)

# System metrics
app_uptime_seconds = Gauge(
    "app_uptime_seconds",
    "Application uptime in seconds",
)

app_info = Gauge(
    "app_info",
    "Application info",
    ["version", "environment"],
)
