from __future__ import annotations

from typing import Optional

from flask import Blueprint, Response
from prometheus_client import Counter, Histogram, generate_latest

metrics_blueprint = Blueprint("metrics_bp", __name__)

CONTENT_TYPE_LATEST = "text/plain; version=0.0.4; charset=utf-8"

ANALYSES = Counter(
    "pinsound_analyses_total",
    "Image analyses handled, by source (url/upload) and outcome.",
    ["source", "outcome"],
)
CACHE_LOOKUPS = Counter(
    "pinsound_analysis_cache_lookups_total",
    "Analysis cache lookups by result (hit/miss).",
    ["result"],
)
UPSTREAM_FAILURES = Counter(
    "pinsound_upstream_failures_total",
    "Failed vendor calls by service.",
    ["service"],
)
ANALYSIS_DURATION = Histogram(
    "pinsound_analysis_seconds",
    "Wall time of a full (uncached) image analysis.",
    ["source"],
    buckets=(1, 2, 5, 10, 20, 40, 60, 120, float("inf")),
)


def record_cache_lookup(hit: bool) -> None:
    CACHE_LOOKUPS.labels(result="hit" if hit else "miss").inc()


def record_upstream_failure(service: str) -> None:
    UPSTREAM_FAILURES.labels(service=service).inc()


def record_analysis(source: str, outcome: str, duration_seconds: Optional[float] = None) -> None:
    ANALYSES.labels(source=source, outcome=outcome).inc()
    if duration_seconds is not None:
        ANALYSIS_DURATION.labels(source=source).observe(duration_seconds)


@metrics_blueprint.route("/metrics")
def metrics_endpoint() -> Response:
    return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)
