"""Structured logging configuration for the Unface age detection service."""

import logging
import logging.handlers
import os
import sys
import json
import time
import socket
from functools import wraps
from typing import Dict, Any, Optional
from pathlib import Path

# Attributes every LogRecord carries; anything else came in through ``extra=``
_RESERVED_ATTRS = frozenset([
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName",
    "relativeCreated", "thread", "threadName", "exc_info",
    "exc_text", "stack_info", "taskName",
])


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def __init__(self):
        super().__init__()
        self.hostname = socket.gethostname()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "hostname": self.hostname,
            "process": record.process,
            "thread": record.thread,
            "thread_name": record.threadName,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


class ColoredFormatter(logging.Formatter):
    """Colored formatter for console output in development."""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m'  # Magenta
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors."""
        # Work on a copy so other handlers still see the plain level name
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


class SensitiveDataFilter(logging.Filter):
    """Filter to redact sensitive information from logs."""

    SENSITIVE_KEYS = {'password', 'token', 'api_key', 'secret', 'credential', 'access_key'}
    REDACTED = '***REDACTED***'

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter sensitive data from log record."""
        if isinstance(record.msg, dict):
            record.msg = self._redact_dict(record.msg)

        if record.args:
            if isinstance(record.args, dict):
                record.args = self._redact_dict(record.args)
            else:
                record.args = tuple(
                    self._redact_dict(arg) if isinstance(arg, dict) else arg
                    for arg in record.args
                )

        for key in list(record.__dict__):
            if key not in _RESERVED_ATTRS and self._is_sensitive(key):
                setattr(record, key, self.REDACTED)

        return True

    def _is_sensitive(self, key: str) -> bool:
        return any(s in key.lower() for s in self.SENSITIVE_KEYS)

    def _redact_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Redact sensitive keys from dictionary."""
        return {
            key: self.REDACTED if self._is_sensitive(str(key)) else value
            for key, value in data.items()
        }


def setup_logging(config: Optional[Dict[str, Any]] = None) -> None:
    """
    Set up structured logging configuration.

    Environment variables ``LOG_LEVEL``, ``LOG_FORMAT`` and ``LOG_DIR`` take
    precedence over the ``logging`` section of the service configuration.

    Args:
        config: Optional logging configuration dictionary
    """
    config = config or {}
    log_level = os.getenv('LOG_LEVEL', config.get('level', 'INFO')).upper()
    log_format = os.getenv('LOG_FORMAT', config.get('format', 'json')).lower()
    log_dir = os.getenv('LOG_DIR', config.get('dir', 'logs'))

    Path(log_dir).mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level))

    # Remove existing handlers
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    sensitive_filter = SensitiveDataFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, log_level))

    if log_format == 'json':
        console_handler.setFormatter(JSONFormatter())
    else:
        console_formatter = ColoredFormatter(
            '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_handler.setFormatter(console_formatter)

    console_handler.addFilter(sensitive_filter)
    root_logger.addHandler(console_handler)

    file_handler = logging.handlers.RotatingFileHandler(
        filename=os.path.join(log_dir, 'unface_age.log'),
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(JSONFormatter())
    file_handler.addFilter(sensitive_filter)
    root_logger.addHandler(file_handler)

    logging.getLogger('werkzeug').setLevel(logging.WARNING)
    logging.getLogger('botocore').setLevel(logging.WARNING)
    logging.getLogger('boto3').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    def exception_hook(exc_type, exc_value, exc_traceback):
        """Log uncaught exceptions."""
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return

        root_logger.critical(
            "Uncaught exception",
            exc_info=(exc_type, exc_value, exc_traceback)
        )

    sys.excepthook = exception_hook

    root_logger.info(
        "Logging configured",
        extra={"log_level": log_level, "log_format": log_format, "log_dir": log_dir}
    )


def log_execution_time(operation_name: str, slow_threshold: float = 5.0):
    """Decorator to log function execution time."""

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger = logging.getLogger(func.__module__)
            start_time = time.time()

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                execution_time = time.time() - start_time
                logger.error(
                    f"{operation_name} failed",
                    extra={
                        "operation": operation_name,
                        "execution_time": execution_time,
                        "error": str(e)
                    },
                )
                raise

            execution_time = time.time() - start_time
            logger.info(
                f"{operation_name} completed",
                extra={
                    "operation": operation_name,
                    "execution_time": execution_time,
                    "function": func.__name__
                }
            )

            if execution_time > slow_threshold:
                logger.warning(
                    f"{operation_name} took longer than expected",
                    extra={
                        "operation": operation_name,
                        "execution_time": execution_time,
                        "threshold": slow_threshold
                    }
                )

            return result

        return wrapper
    return decorator
