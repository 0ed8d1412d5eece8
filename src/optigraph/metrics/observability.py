"""Observability helpers for optigraph."""

from __future__ import annotations

import logging
import time
from contextvars import ContextVar

import structlog
from prometheus_client import Counter, Histogram

_logger_configured = False
_correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="-")


def configure_logging(level: int | str = logging.INFO) -> None:
    global _logger_configured  # noqa: PLW0603 - module-level guard
    if _logger_configured:
        return
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format="%(message)s")
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _logger_configured = True


def bind_correlation_id(correlation_id: str) -> None:
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)
    _correlation_id_var.set(correlation_id)


def clear_correlation_id() -> None:
    structlog.contextvars.clear_contextvars()
    _correlation_id_var.set("-")


def get_correlation_id() -> str:
    return _correlation_id_var.get()


def get_logger(name: str = "optigraph") -> structlog.BoundLogger:
    configure_logging()
    return structlog.get_logger(name)


def _status_class(status_code: int) -> str:
    return f"{status_code // 100}xx"


class GraphMetrics:
    """Prometheus metrics for outbound graph calls."""

    request_latency = Histogram(
        "optigraph_graph_request_duration_seconds",
        "Time spent waiting on the content graph backend.",
        ["method"],
        buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
    )
    responses = Counter(
        "optigraph_graph_responses_total",
        "Graph responses received, by status class.",
        ["method", "status_class"],
    )
    transport_errors = Counter(
        "optigraph_graph_transport_errors_total",
        "Graph calls that failed before a response arrived.",
        ["method"],
    )
    search_items = Histogram(
        "optigraph_search_item_count",
        "Normalized items returned per content search.",
        buckets=(0, 1, 5, 10, 20, 50),
    )

    @classmethod
    def observe_response(cls, method: str, status_code: int, duration_seconds: float) -> None:
        cls.request_latency.labels(method=method).observe(duration_seconds)
        cls.responses.labels(method=method, status_class=_status_class(status_code)).inc()

    @classmethod
    def observe_transport_error(cls, method: str) -> None:
        cls.transport_errors.labels(method=method).inc()

    @classmethod
    def observe_search(cls, item_count: int) -> None:
        cls.search_items.observe(item_count)


class TimedSection:
    """Context manager capturing elapsed time for metrics."""

    def __init__(self) -> None:
        self._start = 0.0
        self.duration = 0.0

    def __enter__(self) -> "TimedSection":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: D401
        self.duration = time.perf_counter() - self._start


__all__ = [
    "GraphMetrics",
    "TimedSection",
    "bind_correlation_id",
    "clear_correlation_id",
    "configure_logging",
    "get_correlation_id",
    "get_logger",
]
