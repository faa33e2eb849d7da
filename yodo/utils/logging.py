"""structlog setup shared by the API process and the preview CLI.

Every event is stamped with ``service`` and ``version`` so lines from
``yodo.main`` and from ``python -m yodo.cli.preview`` stay distinguishable
once they land in the same log store.  Rendering is JSON when ``APP_ENV`` is
``"production"`` (or ``json_output`` is set) and a plain console layout
otherwise; colours are only used when the target stream is a terminal.

Records from the standard library (uvicorn, httpx, the LLM SDKs) are routed
through the same processors via ``ProcessorFormatter``.  The per-request
INFO lines from httpx and httpcore are held at WARNING, since the Reddit
provider already logs one event per channel fetch.
"""

import logging
import os
import sys
from typing import Any, TextIO

import structlog

from yodo import __version__

SERVICE_NAME = "yodo"

_NOISY_LOGGERS = ("httpx", "httpcore")


def _add_service_fields(service: str) -> structlog.types.Processor:
    def add_service_fields(
        logger: Any, method_name: str, event_dict: structlog.types.EventDict
    ) -> structlog.types.EventDict:
        event_dict.setdefault("service", service)
        event_dict.setdefault("version", __version__)
        return event_dict

    return add_service_fields


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = False,
    *,
    service: str = SERVICE_NAME,
    stream: TextIO | None = None,
) -> structlog.BoundLogger:
    """Configure structlog and the stdlib root logger for *service*.

    Args:
        log_level: Minimum level name (DEBUG, INFO, WARNING, ERROR).
        json_output: Force JSON rendering regardless of ``APP_ENV``.
        service: Value of the ``service`` field on every event.
        stream: Where rendered lines go; defaults to ``sys.stdout``.

    Returns:
        A configured structlog BoundLogger.
    """
    use_json = json_output or os.environ.get("APP_ENV", "development") == "production"
    level = logging.getLevelName(log_level.upper())
    out = stream if stream is not None else sys.stdout

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        _add_service_fields(service),
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if use_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=out.isatty())

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=out),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *shared_processors,
            renderer,
        ],
    )
    handler = logging.StreamHandler(out)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a logger bound to *name*, configuring defaults on first use."""
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(logger_name=name)
