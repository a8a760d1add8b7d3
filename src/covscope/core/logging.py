"""structlog setup for covscope.

Every event emitted while parsing a diff or exporting a report carries a
`run_id`. Callers that drive a whole coverage run open `run_scope()` once so
parsing and export share one id; otherwise each operation opens its own.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from covscope.config.models import LoggingConfig, LogOutputConfig

RUN_ID_KEY = "run_id"

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
]


def get_run_id() -> str | None:
    run_id = structlog.contextvars.get_contextvars().get(RUN_ID_KEY)
    return str(run_id) if run_id is not None else None


@contextmanager
def run_scope(run_id: str | None = None) -> Iterator[str]:
    """Bind a run id for the duration of the block.

    An id already bound by an enclosing scope is reused unless `run_id` is
    given explicitly. The previous binding is restored on exit.
    """
    previous = get_run_id()
    rid = run_id or previous or uuid4().hex[:12]
    tokens = structlog.contextvars.bind_contextvars(**{RUN_ID_KEY: rid})
    try:
        yield rid
    finally:
        structlog.contextvars.reset_contextvars(**tokens)


def _formatter(output: LogOutputConfig) -> logging.Formatter:
    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=output.destination == "stderr" and sys.stderr.isatty(),
            pad_event_to=0,
            pad_level=False,
        )
    return structlog.stdlib.ProcessorFormatter(
        processor=renderer, foreign_pre_chain=_SHARED_PROCESSORS
    )


def _handler(destination: str) -> logging.Handler:
    if destination == "stderr":
        return logging.StreamHandler(sys.stderr)
    if destination == "stdout":
        return logging.StreamHandler(sys.stdout)
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a", encoding="utf-8")


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Route structlog through stdlib handlers, one per configured output.

    Args:
        config: Logging configuration with outputs; wins over the other args
        json_format: Single stderr output rendered as JSON
        level: Root level when no config is given
    """
    from covscope.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )
    root_level = logging.getLevelName(config.level)

    structlog.configure(
        processors=[*_SHARED_PROCESSORS, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Not cached so configure_logging can be called again
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(root_level)
    for output in config.outputs:
        handler = _handler(output.destination)
        handler.setLevel(logging.getLevelName(output.level or config.level))
        handler.setFormatter(_formatter(output))
        root_logger.addHandler(handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    # Lazy proxy: module-level loggers pick up later configure_logging calls
    if name:
        return structlog.get_logger(logger=name)  # type: ignore[no-any-return]
    return structlog.get_logger()  # type: ignore[no-any-return]
