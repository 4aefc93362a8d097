"""Configuración centralizada de logging.

Los módulos solo hacen `logging.getLogger(__name__)`; el formato y el nivel
se deciden aquí, una vez, desde el entrypoint.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

from core.config import AppSettings


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)
        return json.dumps(log_data, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter for the terminal."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s [%(levelname)8s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def setup_logging(settings: AppSettings | None = None) -> None:
    """Configura el root logger según `AppSettings`.

    - `log_json=False`: formato de consola legible.
    - `log_json=True`: una línea JSON por registro.
    """

    settings = settings or AppSettings()
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    formatter: logging.Formatter = JSONFormatter() if settings.log_json else ConsoleFormatter()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # httpx loguea cada request a INFO; lo dejamos en WARNING.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
