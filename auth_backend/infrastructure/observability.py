# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time

from flask import Flask, Response, g, request
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

REQUEST_LATENCY = Histogram(
    "auth_request_latency_seconds",
    "Request latency",
    labelnames=("endpoint",),
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5),
)
REQUEST_COUNTER = Counter(
    "auth_requests_total",
    "Number of processed requests",
    labelnames=("endpoint", "status"),
)


def observe_request(endpoint: str, status: int, duration: float) -> None:
    REQUEST_LATENCY.labels(endpoint=endpoint).observe(duration)
    REQUEST_COUNTER.labels(endpoint=endpoint, status=str(status)).inc()


def install_request_metrics(app: Flask) -> None:
    @app.before_request
    def _start_timer() -> None:
        g.metrics_start_time = time.perf_counter()

    @app.after_request
    def _observe(response):
        start = getattr(g, "metrics_start_time", None)
        if start is not None:
            # Unmatched paths share one label.
            observe_request(
                request.endpoint or "unmatched",
                response.status_code,
                time.perf_counter() - start,
            )
        return response


def metrics_response() -> Response:
    return Response(generate_latest(), content_type=CONTENT_TYPE_LATEST)


__all__ = [
    "REQUEST_COUNTER",
    "REQUEST_LATENCY",
    "install_request_metrics",
    "metrics_response",
    "observe_request",
]
