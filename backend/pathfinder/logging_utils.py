from __future__ import annotations

import logging
from pathlib import Path
from tempfile import gettempdir
from typing import Any

from pythonjsonlogger import jsonlogger

from .settings import settings

LOGGER_NAME = "pathfinder"
LOG_FILENAME = "pathfinder.log.jsonl"


def _parse_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def _writable(log_dir: Path) -> bool:
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        marker = log_dir / ".writetest"
        marker.touch(exist_ok=True)
        marker.unlink(missing_ok=True)
    except OSError:
        return False
    return True


def _resolve_log_dir(configured_out_dir: str) -> Path | None:
    """First writable of the configured out dir, ./out and the temp dir."""
    candidates = (
        Path(configured_out_dir) / "logs",
        Path.cwd() / "out" / "logs",
        Path(gettempdir()) / "apex-pathfinder" / "logs",
    )
    return next((log_dir for log_dir in candidates if _writable(log_dir)), None)


def _build_handlers(formatter: logging.Formatter) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    log_dir = _resolve_log_dir(settings.out_dir)
    if log_dir is not None:
        try:
            handlers.append(logging.FileHandler(log_dir / LOG_FILENAME, encoding="utf-8"))
        except OSError:
            pass
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def get_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    # Reloaders import the app twice.
    if getattr(logger, "_configured", False):
        return logger

    logger.setLevel(_parse_level(settings.log_level))
    logger.propagate = False
    for handler in _build_handlers(jsonlogger.JsonFormatter()):
        logger.addHandler(handler)
    logger._configured = True  # type: ignore[attr-defined]
    return logger


def log_event(event: str, *, level: int = logging.INFO, **fields: Any) -> None:
    """Emit one JSON record whose message and ``event`` key are both ``event``."""
    get_logger().log(level, event, extra={"event": event, **fields})
