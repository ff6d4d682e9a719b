from logging import StreamHandler, getLogger

from structlog import configure
from structlog.contextvars import merge_contextvars
from structlog.dev import ConsoleRenderer
from structlog.processors import (
    JSONRenderer,
    StackInfoRenderer,
    TimeStamper,
    add_log_level,
    format_exc_info,
)
from structlog.stdlib import LoggerFactory, ProcessorFormatter, add_logger_name
from structlog.typing import Processor

from salesbot.settings.settings import Settings

__all__ = ["setup_logging"]


def _renderer(config: Settings) -> Processor:
    if config.ENVIRONMENT == "DEV":
        return ConsoleRenderer()
    return JSONRenderer()


def setup_logging(config: Settings) -> None:
    shared_processors: list[Processor] = [
        merge_contextvars,
        add_log_level,
        add_logger_name,
        StackInfoRenderer(),
        TimeStamper(fmt="iso"),
    ]

    configure(
        processors=[
            *shared_processors,
            ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer = _renderer(config)
    final_processors: list[Processor] = [ProcessorFormatter.remove_processors_meta]
    if not isinstance(renderer, ConsoleRenderer):
        # ConsoleRenderer prints tracebacks itself
        final_processors.append(format_exc_info)
    final_processors.append(renderer)

    formatter = ProcessorFormatter(
        # Records from plain stdlib loggers (uvicorn, httpx) go through the same chain
        foreign_pre_chain=shared_processors,
        processors=final_processors,
    )

    handler = StreamHandler()
    handler.setFormatter(formatter)

    root = getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(config.LOG_LEVEL.upper())
