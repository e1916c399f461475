"""Structured logging setup: human-readable to stderr, optional JSON file."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

import structlog


def setup_logging(log_dir: str = "", log_name: str = "cleanurls", level: str = "WARNING") -> structlog.stdlib.BoundLogger:
    """Configure structlog over stdlib logging.

    Console output goes to stderr so stdout stays reserved for cleaned URLs.
    When *log_dir* is set, JSON lines are also written to ``{log_dir}/{log_name}.log``.
    """
    handlers: list[logging.Handler] = []

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=False),
        )
    )
    handlers.append(stderr_handler)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        # JSON lines, 10 MB per file, keep 5 backups
        file_handler = RotatingFileHandler(
            log_path / f"{log_name}.log",
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
        )
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.processors.JSONRenderer(),
            )
        )
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())
    # Clear existing handlers to avoid duplicates on repeated calls
    root_logger.handlers.clear()
    for handler in handlers:
        root_logger.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger(log_name)
