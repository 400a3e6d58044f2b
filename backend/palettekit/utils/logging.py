"""
Palettekit Structured Logging
Loguru sink setup plus a small wrapper that attaches per-request fields.
"""
import sys
from typing import Any, Dict, Optional

from loguru import logger

from palettekit.config import config

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message} | {extra}"


def configure_logging(level: Optional[str] = None, serialize: bool = False) -> None:
    """
    Replace every loguru handler with the palettekit stdout sink.

    Never called on import; this is for applications that want palettekit
    to own their log output.

    Args:
        level: Minimum level (defaults to PALETTE_LOG_LEVEL)
        serialize: Emit JSON records instead of the text format
    """
    logger.remove()
    logger.add(sys.stdout, format=LOG_FORMAT, level=level or config.LOG_LEVEL, serialize=serialize)


class StructuredLogger:
    """
    Logger for orchestration events.

    Fields passed as ``extra`` (caller id, cache key, durations) are bound
    onto the record so they show up in ``{extra}`` or in serialized output.
    Fields given to the constructor are attached to every record.
    """

    def __init__(self, **context: Any):
        self._context = context

    def bind(self, **fields: Any) -> "StructuredLogger":
        """Child logger carrying additional context fields."""
        return StructuredLogger(**{**self._context, **fields})

    def _emit(self, level: str, message: str, extra: Optional[Dict[str, Any]]) -> None:
        fields = {**self._context, **(extra or {})}
        target = logger.bind(**fields) if fields else logger
        # depth=2 reports the caller of info()/debug(), not this wrapper
        target.opt(depth=2).log(level, message)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit("INFO", message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit("WARNING", message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit("ERROR", message, extra)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit("DEBUG", message, extra)


# Global logger instance
_logger: Optional[StructuredLogger] = None


def get_logger() -> StructuredLogger:
    """
    Get or create the global logger.

    Sinks are left alone; applications that want the palettekit format
    call :func:`configure_logging` themselves.
    """
    global _logger
    if _logger is None:
        _logger = StructuredLogger(component="palettekit")
    return _logger
