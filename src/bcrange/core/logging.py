"""structlog setup and analysis-pass correlation.

Every full analysis of a workspace is one *pass*. A pass gets a short hex id
that is stamped on each event logged while it runs, so the per-file and
per-project events of one CLI invocation can be grouped in a log file.

Events go through stdlib logging: one handler per configured output, each
with its own level and renderer (console or JSON).
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from bcrange.config.models import LoggingConfig, LogOutputConfig

_pass_id: ContextVar[str | None] = ContextVar("pass_id", default=None)

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}
_CONSOLE_DESTINATIONS = {"stderr", "stdout"}


def get_pass_id() -> str | None:
    return _pass_id.get()


@contextmanager
def analysis_pass(**context: Any) -> Iterator[str]:
    """Run a block as one analysis pass.

    Yields the new pass id. Extra keyword context (e.g. ``shared_mode``) is
    bound to every event logged inside the block. The previous pass id is
    restored on exit.
    """
    token = _pass_id.set(uuid4().hex[:12])
    try:
        with structlog.contextvars.bound_contextvars(**context):
            yield _pass_id.get() or ""
    finally:
        _pass_id.reset(token)


def _stamp_pass_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if pid := get_pass_id():
        event_dict.setdefault("pass_id", pid)
    return event_dict


def _level(name: str | None, fallback: int = logging.INFO) -> int:
    if name is None:
        return fallback
    return _LEVELS.get(name.upper(), fallback)


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
        _stamp_pass_id,  # type: ignore[list-item]
    ]


def _renderer(output: LogOutputConfig) -> structlog.types.Processor:
    if output.format == "json":
        return structlog.processors.JSONRenderer()
    stream = sys.stdout if output.destination == "stdout" else sys.stderr
    return structlog.dev.ConsoleRenderer(
        colors=output.destination in _CONSOLE_DESTINATIONS and stream.isatty(),
        pad_event_to=0,
        pad_level=False,
    )


def _handler(destination: str) -> logging.Handler:
    """stderr, stdout, or an append-mode file (parent dirs created)."""
    if destination == "stderr":
        return logging.StreamHandler(sys.stderr)
    if destination == "stdout":
        return logging.StreamHandler(sys.stdout)
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a")


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Configure structlog. Pass config for multi-output, or use simple params.

    Args:
        config: Logging configuration with outputs (wins over the other args)
        json_format: Single stderr output rendered as JSON instead of console
        level: Root level for the single-output setup
    """
    from bcrange.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level.upper(),  # type: ignore[arg-type]
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    root_level = _level(config.level)
    shared = _shared_processors()

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfigured per CLI invocation, so loggers must not be cached
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    for old in list(root_logger.handlers):
        root_logger.removeHandler(old)
        old.close()
    root_logger.setLevel(root_level)

    for output in config.outputs:
        handler = _handler(output.destination)
        handler.setLevel(_level(output.level, root_level))
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=_renderer(output),
                foreign_pre_chain=shared,
            )
        )
        root_logger.addHandler(handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]
