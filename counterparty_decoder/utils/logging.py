"""Structured logging setup for the decoder and its CLI."""

import sys
import logging
import logging.handlers
from pathlib import Path
from typing import List
import structlog
from structlog.stdlib import LoggerFactory

from counterparty_decoder.models.config import DecoderConfig

# Libraries whose debug output drowns the decoder's own
NOISY_LOGGERS = ("urllib3", "requests")


def _processors(log_format: str) -> List:
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.format_exc_info,
    ]
    if log_format.lower() == "json":
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    return processors


def _replace_file_handler(root_logger: logging.Logger, config: DecoderConfig, level: int) -> None:
    """Install one rotating handler for ``config.log_file``, dropping earlier ones."""
    for handler in list(root_logger.handlers):
        if isinstance(handler, logging.handlers.RotatingFileHandler):
            root_logger.removeHandler(handler)
            handler.close()

    log_path = Path(config.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=config.log_max_size_mb * 1024 * 1024,
        backupCount=config.log_backup_count,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    root_logger.addHandler(file_handler)


def setup_logging(config: DecoderConfig) -> None:
    """Configure structlog over stdlib logging.

    Log lines go to stderr so decoded JSON on stdout stays machine readable.
    Calling it again reconfigures in place rather than stacking file handlers.
    """
    level = getattr(logging, config.log_level.upper())
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    if config.log_file:
        _replace_file_handler(root_logger, config, level)

    structlog.configure(
        processors=_processors(config.log_format),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )
