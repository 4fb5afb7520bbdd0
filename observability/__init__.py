"""
Observability Module
====================

Metrics, tracing and structured logging for the service.
"""

from observability.logging_config import bind_context, clear_context, get_logger, setup_logging
from observability.metrics import setup_metrics, track_retrieval_metrics, track_sql_generation
from observability.tracing import setup_tracing

__all__ = [
    "setup_metrics",
    "track_retrieval_metrics",
    "track_sql_generation",
    "setup_tracing",
    "setup_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
