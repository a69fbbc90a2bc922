"""
Structured logging for the catalog service using structlog.
Provides JSON or console output, optional file logging, and catalog event helpers.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union
import structlog
from structlog.stdlib import LoggerFactory


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[Union[str, Path]] = None,
    debug: bool = False
) -> None:
    """
    Set up structured logging with configurable output formats.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format (json or console)
        log_file: Optional log file path
        debug: Add call-site details to every event
    """
    level = getattr(logging, log_level.upper())

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )
    logging.getLogger().setLevel(level)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if debug:
        processors.append(structlog.processors.CallsiteParameterAdder())

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter('%(message)s'))
        logging.getLogger().addHandler(file_handler)

    structlog.get_logger(__name__).info(
        "Logging system initialized",
        level=log_level,
        format=log_format,
        file=str(log_file) if log_file else None,
        debug=debug
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


class CatalogLogger:
    """
    Logger for catalog mutations with bound context.
    """

    def __init__(self, name: str = "catalog"):
        self.logger = structlog.get_logger(name)
        self.context = {}

    def bind_context(self, **kwargs) -> 'CatalogLogger':
        """Bind context variables to every subsequent event."""
        self.context.update(kwargs)
        return self

    def clear_context(self) -> 'CatalogLogger':
        """Clear all context variables."""
        self.context.clear()
        return self

    def log_seed_loaded(self, count: int, next_id: int) -> None:
        """Log the initial collection being installed."""
        self.logger.info("Catalog seeded", count=count, next_id=next_id, **self.context)

    def log_book_created(self, book_id: int, title: str) -> None:
        self.logger.info("Book created", book_id=book_id, title=title, **self.context)

    def log_book_updated(self, book_id: int, fields: list) -> None:
        self.logger.info("Book updated", book_id=book_id, fields=sorted(fields), **self.context)

    def log_book_deleted(self, book_id: int, title: str) -> None:
        self.logger.info("Book deleted", book_id=book_id, title=title, **self.context)

    def log_rejected(self, operation: str, reason: str, book_id: Optional[int] = None) -> None:
        """Log a mutation that was refused (unknown id or invalid payload)."""
        self.logger.warning(
            "Catalog operation rejected",
            operation=operation,
            reason=reason,
            book_id=book_id,
            **self.context
        )
