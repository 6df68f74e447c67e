"""Logging for gradle-inspector: structlog events rendered through stdlib logging.

Event names are namespaced by pipeline stage (``tooling.*``, ``graph.*``,
``metadata.*``, ``inspector.*``); every recorded issue is also logged as
``issue.recorded`` at the level matching its severity. Gradle's own console
output is only visible at DEBUG (stdout) and WARNING (stderr).
"""

from __future__ import annotations

import logging
import logging.config
import os
import sys

import structlog

LEVEL_ENV = "GRADLE_INSPECTOR_LOG_LEVEL"
FORMAT_ENV = "GRADLE_INSPECTOR_LOG_FORMAT"

# Per-request chatter of the checksum client; failed checksums are logged by us.
_QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: str | None = None) -> None:
    """Configure structlog and stdlib logging for the CLI.

    *level* wins over ``GRADLE_INSPECTOR_LOG_LEVEL`` (default INFO).
    ``GRADLE_INSPECTOR_LOG_FORMAT`` selects ``console`` (default) or ``json``.
    Everything goes to stderr: stdout carries the ``--json`` result.
    """
    log_level = (level or os.environ.get(LEVEL_ENV, "INFO")).upper()
    log_format = os.environ.get(FORMAT_ENV, "console").lower()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=shared_processors
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    loggers: dict[str, dict] = {"gradle_inspector": {"level": log_level}}
    for name in _QUIET_LOGGERS:
        # At DEBUG the request log helps diagnosing checksum lookups.
        loggers[name] = {"level": "DEBUG" if log_level == "DEBUG" else "WARNING"}

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": shared_processors,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        renderer,
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "structlog",
                },
            },
            "root": {"handlers": ["stderr"], "level": log_level},
            "loggers": loggers,
        }
    )
