"""Настройка логирования WordPress Content Source.

Логи пишутся в `logs/app.log` и `logs/errors.log` с ротацией по размеру,
опционально дублируются в stderr (для CLI с --verbose).
Поддерживаются run_id (correlation id) и error_code в каждой записи.
"""

from __future__ import annotations

import logging
import sys
import time
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)sZ %(levelname)s [%(run_id)s] %(name)s: %(message)s"
MAX_LOG_BYTES = 2 * 1024 * 1024
LOG_BACKUP_COUNT = 10

# run_id текущего запуска CLI или запроса рендер-слоя.
_run_id_ctx: ContextVar[Optional[str]] = ContextVar("run_id", default=None)


def set_run_id(run_id: Optional[str]) -> None:
    """Установить run_id для текущего контекста (логи)."""
    _run_id_ctx.set(run_id)


def get_run_id() -> Optional[str]:
    """Текущий run_id из контекста."""
    return _run_id_ctx.get()


class RunIdFilter(logging.Filter):
    """Добавляет run_id и error_code в каждую запись лога (из контекста и extra)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = getattr(record, "run_id", None) or _run_id_ctx.get() or "-"
        record.error_code = getattr(record, "error_code", None) or "-"
        return True


class AppLogFormatter(logging.Formatter):
    """UTC-время; error_code дописывается в конец строки, если задан."""

    converter = time.gmtime

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        if getattr(record, "error_code", "-") != "-":
            base += f" error_code={record.error_code}"
        return base


def _rotating_handler(path: Path, level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_app_logging(
    logs_dir: Path,
    level: int = logging.INFO,
    run_id: Optional[str] = None,
    console: bool = False,
) -> None:
    """Настроить логирование в `logs/app.log` и `logs/errors.log` с ротацией.

    Args:
        logs_dir: Каталог для логов.
        level: Уровень логирования (по умолчанию INFO).
        run_id: Correlation id для этого запуска (добавляется во все записи).
        console: Дублировать записи в stderr.

    Returns:
        None.
    """
    if run_id is not None:
        set_run_id(run_id)

    logs_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level)

    # Повторный вызов не добавляет хендлеры.
    for h in root.handlers:
        if isinstance(h, RotatingFileHandler) and getattr(h, "baseFilename", "").endswith("app.log"):
            return

    run_filter = RunIdFilter()
    formatter = AppLogFormatter(LOG_FORMAT)

    handlers: list[logging.Handler] = [
        _rotating_handler(logs_dir / "app.log", level),
        _rotating_handler(logs_dir / "errors.log", logging.WARNING),
    ]
    if console:
        stream = logging.StreamHandler(sys.stderr)
        stream.setLevel(level)
        handlers.append(stream)

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(run_filter)
        root.addHandler(handler)
