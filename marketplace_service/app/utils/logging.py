"""
Marketplace Service Logging Module
==================================
Structured JSON logging for the Marketplace Service.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

_RESERVED_RECORD_FIELDS = frozenset(
    [
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "getMessage",
        "exc_info",
        "exc_text",
        "stack_info",
    ]
)


class MarketplaceJSONFormatter(logging.Formatter):
    """Custom JSON formatter for Marketplace Service structured logging"""

    def __init__(self, exclude_fields: Optional[List[str]] = None):
        super().__init__()
        self.skipped_fields = _RESERVED_RECORD_FIELDS.union(exclude_fields or ())

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "service": "marketplace_service",
            "logger": record.name,
            "message": record.getMessage(),
        }

        log_entry.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in self.skipped_fields
        )

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str, ensure_ascii=False)


def _rotating_handler(
    path: Path,
    level: int,
    formatter: logging.Formatter,
    max_file_size: int,
    backup_count: int,
) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=max_file_size, backupCount=backup_count)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_marketplace_logging(
    service_name: str = "marketplace_service",
    log_level: str = "INFO",
    enable_file_logging: bool = False,
    log_dir: Optional[str] = None,
    max_file_size: int = 100 * 1024 * 1024,  # 100MB
    backup_count: int = 5,
    exclude_fields: Optional[List[str]] = None,
) -> logging.Logger:
    """
    Return the named logger writing JSON lines to stdout.

    With file logging enabled, two rotating files are added under ``log_dir``
    (default ``marketplace_service/logs``): ``<name>.log`` with every record
    and ``<name>_errors.log`` with ERROR and above.
    """

    level = getattr(logging, log_level.upper(), logging.INFO)
    logger = logging.getLogger(service_name)
    logger.setLevel(level)
    logger.handlers.clear()

    formatter = MarketplaceJSONFormatter(exclude_fields=exclude_fields)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if enable_file_logging:
        target = Path(log_dir) if log_dir else Path(__file__).parents[2] / "logs"
        target.mkdir(parents=True, exist_ok=True)
        logger.addHandler(
            _rotating_handler(
                target / f"{service_name}.log",
                level,
                formatter,
                max_file_size,
                backup_count,
            )
        )
        logger.addHandler(
            _rotating_handler(
                target / f"{service_name}_errors.log",
                logging.ERROR,
                formatter,
                max_file_size,
                backup_count,
            )
        )

    return logger
