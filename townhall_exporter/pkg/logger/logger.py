"""
Structured logging module.

Provides JSON-formatted structured logging with per-connection context.
"""
import logging
import json
import sys
from datetime import datetime, timezone
from typing import Any, Optional
from contextvars import ContextVar


# Context variable for the id of the connection being served
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# LogRecord attributes that are not user supplied extras
_RESERVED_ATTRS = frozenset((
    "name", "msg", "args", "levelname", "levelno",
    "pathname", "filename", "module", "exc_info",
    "exc_text", "stack_info", "lineno", "funcName",
    "created", "msecs", "relativeCreated", "thread",
    "threadName", "processName", "process", "message",
    "taskName",
))


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Every record becomes a single JSON line so the exporter's own logs can be
    shipped next to the metrics it produces.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record as JSON.

        Args:
            record: Log record to format.

        Returns:
            JSON-formatted log string.
        """
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        request_id = request_id_var.get()
        if request_id:
            log_data["request_id"] = request_id

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = self._serialize_value(value)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)

    def _serialize_value(self, value: Any) -> Any:
        """Serialize a value for JSON output."""
        if isinstance(value, (str, int, float, bool, type(None))):
            return value
        if isinstance(value, (list, tuple)):
            return [self._serialize_value(v) for v in value]
        if isinstance(value, dict):
            return {k: self._serialize_value(v) for k, v in value.items()}
        return str(value)


class StructuredLogger(logging.Logger):
    """
    Logger with structured logging support.

    Allows passing extra fields as keyword arguments:

        logger.info("Scrape finished", duration_ms=120, blocks=2)
    """

    def _log_with_extras(
        self,
        level: int,
        msg: str,
        args: tuple,
        **kwargs: Any,
    ) -> None:
        if not self.isEnabledFor(level):
            return
        exc_info = kwargs.pop("exc_info", None)
        stack_info = kwargs.pop("stack_info", False)
        extra = dict(kwargs.pop("extra", None) or {})
        extra.update(kwargs)
        super()._log(
            level, msg, args,
            exc_info=exc_info, extra=extra, stack_info=stack_info,
        )

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log debug message with extra fields."""
        self._log_with_extras(logging.DEBUG, msg, args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log info message with extra fields."""
        self._log_with_extras(logging.INFO, msg, args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log warning message with extra fields."""
        self._log_with_extras(logging.WARNING, msg, args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log error message with extra fields."""
        self._log_with_extras(logging.ERROR, msg, args, **kwargs)

    def critical(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log critical message with extra fields."""
        self._log_with_extras(logging.CRITICAL, msg, args, **kwargs)


# Set custom logger class
logging.setLoggerClass(StructuredLogger)


def setup_logging(
    level: str = "INFO",
    json_format: bool = True,
) -> None:
    """
    Set up logging configuration.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Whether to use JSON format.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, level.upper()))

    if json_format:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )
        )

    root_logger.addHandler(handler)


def get_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__).

    Returns:
        StructuredLogger instance.
    """
    return logging.getLogger(name)  # type: ignore


def set_request_id(request_id: Optional[str]) -> None:
    """
    Set the request ID in context.

    Args:
        request_id: Identifier of the connection being served.
    """
    request_id_var.set(request_id)


def get_request_id() -> Optional[str]:
    """
    Get the current request ID from context.

    Returns:
        Request ID or None.
    """
    return request_id_var.get()
