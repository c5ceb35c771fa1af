"""Logging utilities for the allocation core."""

from __future__ import annotations

import logging
from typing import Any

import structlog

RENDERERS = ("json", "console")


def configure_logging(level: str = "INFO", *, renderer: str = "json") -> None:
    """Configure structlog, routed through stdlib logging so output lands on stderr.

    ``renderer`` is ``json`` for machine-readable lines or ``console`` for
    operators at a terminal. Context bound with
    ``structlog.contextvars.bound_contextvars`` is merged into every event.
    """
    if renderer not in RENDERERS:
        raise ValueError(f"Unknown log renderer {renderer!r}; expected one of {RENDERERS}")
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(level=log_level, format="%(message)s")

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
    ]
    if renderer == "json":
        processors += [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )
