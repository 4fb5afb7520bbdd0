"""
Prometheus Metrics
==================

Retrieval and HTTP metrics for monitoring and alerting.
"""

import time
from typing import Callable

from fastapi import FastAPI, Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    Info,
    generate_latest,
    multiprocess,
)

REGISTRY = CollectorRegistry()

APP_INFO = Info(
    "graphrag_text2sql",
    "Graph RAG text-to-SQL service information",
    registry=REGISTRY,
)

RETRIEVALS_TOTAL = Counter(
    "graphrag_retrievals_total",
    "Subgraph retrievals by outcome",
    ["outcome"],  # ok, partial, empty, error
    registry=REGISTRY,
)

RETRIEVAL_DURATION = Histogram(
    "graphrag_retrieval_duration_seconds",
    "Subgraph retrieval duration in seconds",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
    registry=REGISTRY,
)

RETRIEVAL_HOPS = Histogram(
    "graphrag_retrieval_hops",
    "Expansion hops completed per retrieval",
    buckets=[0, 1, 2, 3, 4, 5],
    registry=REGISTRY,
)

SUBGRAPH_NODES = Histogram(
    "graphrag_subgraph_nodes",
    "Nodes in the returned subgraph",
    buckets=[0, 5, 10, 25, 50, 100, 250, 500],
    registry=REGISTRY,
)

SUBGRAPH_EDGES = Histogram(
    "graphrag_subgraph_edges",
    "Edges in the returned subgraph",
    buckets=[0, 5, 10, 25, 50, 100, 250, 500],
    registry=REGISTRY,
)

AUGMENTATION_FAILURES = Counter(
    "graphrag_keyword_augmentation_failures_total",
    "Keyword augmentation calls that failed and were skipped",
    registry=REGISTRY,
)

SQL_GENERATIONS_TOTAL = Counter(
    "graphrag_sql_generations_total",
    "SQL generation attempts by status",
    ["status"],  # success, failure
    registry=REGISTRY,
)

HTTP_REQUESTS_TOTAL = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
    registry=REGISTRY,
)

HTTP_REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
    registry=REGISTRY,
)

ACTIVE_RETRIEVALS = Gauge(
    "graphrag_active_requests",
    "Retrieval-backed requests currently being processed",
    registry=REGISTRY,
)

RETRIEVAL_PATHS = {"/api/v1/ask", "/api/v1/subgraph"}


def setup_metrics(app: FastAPI, version: str = "0.1.0", environment: str = "development") -> None:
    """
    Set up Prometheus HTTP metrics for the FastAPI application.

    Args:
        app: FastAPI application instance
        version: Service version reported in the info metric
        environment: Deployment environment reported in the info metric
    """
    APP_INFO.info({"version": version, "environment": environment})

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        is_retrieval = request.url.path in RETRIEVAL_PATHS
        if is_retrieval:
            ACTIVE_RETRIEVALS.inc()

        try:
            response = await call_next(request)
            duration = time.perf_counter() - start_time

            HTTP_REQUESTS_TOTAL.labels(
                method=request.method,
                endpoint=request.url.path,
                status=response.status_code,
            ).inc()
            HTTP_REQUEST_DURATION.labels(
                method=request.method,
                endpoint=request.url.path,
            ).observe(duration)

            return response
        finally:
            if is_retrieval:
                ACTIVE_RETRIEVALS.dec()


def track_retrieval_metrics(
    outcome: str,
    duration_seconds: float,
    hops: int = 0,
    nodes: int = 0,
    edges: int = 0,
    augmentation_failed: bool = False,
) -> None:
    """
    Record one retrieval.

    Args:
        outcome: ok, partial, empty or error
        duration_seconds: Total retrieval time
        hops: Expansion hops completed
        nodes: Nodes in the subgraph
        edges: Edges in the subgraph
        augmentation_failed: Whether keyword augmentation was skipped
    """
    RETRIEVALS_TOTAL.labels(outcome=outcome).inc()
    RETRIEVAL_DURATION.observe(duration_seconds)
    if outcome != "error":
        RETRIEVAL_HOPS.observe(hops)
        SUBGRAPH_NODES.observe(nodes)
        SUBGRAPH_EDGES.observe(edges)
    if augmentation_failed:
        AUGMENTATION_FAILURES.inc()


def track_sql_generation(success: bool) -> None:
    SQL_GENERATIONS_TOTAL.labels(status="success" if success else "failure").inc()


async def metrics_endpoint(request: Request) -> Response:
    """Prometheus metrics in text exposition format."""
    try:
        registry = CollectorRegistry()
        multiprocess.MultiProcessCollector(registry)
        metrics = generate_latest(registry)
    except ValueError:
        # Not running under a multiprocess server
        metrics = generate_latest(REGISTRY)

    return Response(content=metrics, media_type=CONTENT_TYPE_LATEST)
