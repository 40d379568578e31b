"""
Prometheus metrics middleware for the LeadMaps API.

Exposes /metrics endpoint with request counters, latency histograms,
and custom business metrics.
"""

import logging
import time

from fastapi import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

# Request metrics
REQUEST_COUNT = Counter(
    "leadmaps_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)
REQUEST_LATENCY = Histogram(
    "leadmaps_http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)
ACTIVE_REQUESTS = Gauge(
    "leadmaps_http_active_requests",
    "Currently active HTTP requests",
)

# Business metrics
LEADS_INGESTED = Counter(
    "leadmaps_leads_ingested_total",
    "Leads ingested into the session context",
)
LEAD_SCORE_HIST = Histogram(
    "leadmaps_lead_score",
    "Lead score distribution",
    buckets=[10, 20, 30, 40, 50, 60, 70, 80, 90, 100],
)
ANALYSIS_COUNT = Counter(
    "leadmaps_analysis_requests_total",
    "Assistant requests by analysis type",
    ["analysis_type"],
)
LLM_LATENCY = Histogram(
    "leadmaps_llm_duration_seconds",
    "Completion latency",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
)
LLM_FAILURES = Counter(
    "leadmaps_llm_failures_total",
    "Failed or rejected completion requests",
)


def record_ingestion(scores):
    """Record an ingested batch and its score distribution."""
    scores = list(scores)
    LEADS_INGESTED.inc(len(scores))
    for score in scores:
        LEAD_SCORE_HIST.observe(score)


def record_analysis(analysis_type: str):
    """Record an assistant request classification."""
    ANALYSIS_COUNT.labels(analysis_type=analysis_type).inc()


def record_llm_latency(seconds: float):
    """Record completion latency."""
    LLM_LATENCY.observe(seconds)


def record_llm_failure():
    LLM_FAILURES.inc()


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware that records HTTP request metrics."""

    async def dispatch(self, request: Request, call_next):
        ACTIVE_REQUESTS.inc()
        start = time.time()

        try:
            response = await call_next(request)
        except Exception:
            ACTIVE_REQUESTS.dec()
            raise

        duration = time.time() - start
        # Route template keeps label cardinality bounded (/leads/{lead_id}/approach)
        route = request.scope.get("route")
        endpoint = getattr(route, "path", request.url.path)

        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()
        REQUEST_LATENCY.labels(
            method=request.method,
            endpoint=endpoint,
        ).observe(duration)
        ACTIVE_REQUESTS.dec()

        return response


async def metrics_endpoint(request: Request) -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
