"""Tracing helpers for outbound geocoding requests."""
from __future__ import annotations

import contextlib
import logging
import time
from typing import Iterator, Optional

import structlog
from structlog.contextvars import bound_contextvars


def _logger() -> structlog.stdlib.BoundLogger:
    # stdlib-backed so output follows the logging config, never bare stdout
    return structlog.wrap_logger(logging.getLogger("georesolve.trace"), wrapper_class=structlog.stdlib.BoundLogger)


@contextlib.contextmanager
def span(*, name: str, location: Optional[str] = None) -> Iterator[None]:
    """Bind the location for nested log lines and time the enclosed block."""
    start = time.perf_counter()
    with bound_contextvars(span=name, location=location):
        try:
            yield
        finally:
            elapsed_ms = int((time.perf_counter() - start) * 1000)
            _logger().debug("trace_span", elapsed_ms=elapsed_ms)


def log_request(*, url: str) -> None:
    _logger().info("geocode_request", url=url)


def log_response(*, status: int, bytes_read: int, elapsed_ms: int) -> None:
    _logger().info(
        "geocode_response",
        status=status,
        bytes=bytes_read,
        elapsed_ms=elapsed_ms,
    )


def log_body(*, body: str) -> None:
    _logger().debug("geocode_body", body=body)


def log_failure(*, kind: str, detail: str) -> None:
    _logger().warning("geocode_failed", kind=kind, detail=detail)
