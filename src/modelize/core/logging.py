"""Logging setup for modelize.

modelize modules only obtain loggers; nothing is configured on import.
Applications that want modelize output call configure_logging(), which
routes structlog events and stdlib records (httpx included) through one
renderer.

Request logs carry ``model``, ``method`` and ``url`` bound once per
request through request_logger(), so every line of one exchange can be
correlated without repeating the fields at each call site.
"""

import logging
import sys
from collections.abc import Iterable
from enum import Enum
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter

# Connection-level chatter from the HTTP stack
_HTTP_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "hpack")


def _plain_enums(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Render enum members (HttpMethod, OperationClass) as their values."""
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
    return event_dict


def _drop_formatter_keys(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    event_dict.pop("_record", None)
    event_dict.pop("_from_structlog", None)
    return event_dict


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "INFO",
    quiet_loggers: Iterable[str] = (),
) -> None:
    """Send modelize and stdlib logging to stdout in one format.

    Args:
        json_output: One JSON object per line instead of console lines
        level: Root log level name (DEBUG, INFO, WARNING, ERROR)
        quiet_loggers: Extra stdlib logger names held at WARNING or above,
            in addition to the HTTP client loggers
    """
    log_level = getattr(logging, level.upper())

    pre_chain: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _plain_enums,
        structlog.stdlib.PositionalArgumentsFormatter(),
    ]

    renderer: Any
    if json_output:
        renderer = structlog.processors.JSONRenderer()
        render_chain: list[Any] = [_drop_formatter_keys, structlog.processors.format_exc_info, renderer]
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)
        render_chain = [_drop_formatter_keys, renderer]

    structlog.configure(
        processors=[*pre_chain, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Loggers are created at import time; caching would pin the chain
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ProcessorFormatter(processors=render_chain, foreign_pre_chain=pre_chain))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)

    quiet_level = max(log_level, logging.WARNING)
    for name in (*_HTTP_LOGGERS, *quiet_loggers):
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: str, **context: Any) -> structlog.stdlib.BoundLogger:
    """Logger for a module, optionally with context bound up front."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger.bind(**context) if context else logger


def request_logger(name: str, *, model: str, method: Any, url: str) -> structlog.stdlib.BoundLogger:
    """Logger bound to one request: model name, verb and full URL."""
    return get_logger(name, model=model, method=method, url=url)
