# -*- coding: utf-8 -*-
import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional

import structlog

_logger_initialized = False


def setup_logging(log_level: Optional[str] = None, log_format: Optional[str] = None,
                  log_file: Optional[str] = None):
    global _logger_initialized

    # Idempotent: only the first call configures handlers
    if not _logger_initialized:
        level_name = (log_level or os.getenv("LOG_LEVEL") or "INFO").upper()
        fmt = (log_format or os.getenv("LOG_FORMAT") or "text").lower()
        level_value = getattr(logging, level_name, logging.INFO)

        handlers = [logging.StreamHandler()]
        if log_file:
            path = Path(log_file)
            path.parent.mkdir(parents=True, exist_ok=True)
            # Ротация по размеру (5MB), один backup
            handlers.append(logging.handlers.RotatingFileHandler(
                path,
                maxBytes=5 * 1024 * 1024,
                backupCount=1,
                encoding="utf-8",
            ))
        formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        for handler in handlers:
            handler.setFormatter(formatter)
        logging.basicConfig(level=level_value, handlers=handlers)

        renderer = (
            structlog.processors.JSONRenderer(ensure_ascii=False)
            if fmt == "json"
            else structlog.processors.KeyValueRenderer(key_order=["event", "logger", "level"])
        )
        structlog.configure(
            wrapper_class=structlog.make_filtering_bound_logger(level_value),
            logger_factory=structlog.stdlib.LoggerFactory(),
            processors=[
                structlog.stdlib.add_logger_name,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.add_log_level,
                structlog.processors.format_exc_info,
                renderer,
            ],
        )
        _logger_initialized = True

    return structlog.get_logger("proverkabiz")


def get_logger(name: str = "proverkabiz"):
    """Получить логгер по имени"""
    return structlog.get_logger(name)
