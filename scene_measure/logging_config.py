"""
Structured logging for the scene_measure package.

Provides:
- JSON-lines formatter for interaction traces (points become lists)
- Compact console formatter
- setup_logging / configure_from for the host application
- log_timing / timed around annotation synthesis
- LogContext for tagging records with the active measurement session

Usage:
    from scene_measure.logging_config import setup_logging, get_logger

    setup_logging(level=logging.DEBUG, json_file="measure.log.json")

    logger = get_logger(__name__)
    logger.debug("Measurement added", extra={"distance": 5.0, "count": 1})
"""

import json
import logging
import sys
import time
from contextlib import contextmanager
from datetime import datetime
from functools import wraps
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional, TypeVar, Union

import numpy as np

F = TypeVar('F', bound=Callable[..., Any])

PACKAGE_LOGGER = "scene_measure"

# LogRecord attributes that are not user-supplied extras
_RESERVED_KEYS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {'message', 'asctime', 'taskName'}

_LEVEL_COLORS = {
    logging.DEBUG: '\033[36m',
    logging.INFO: '\033[32m',
    logging.WARNING: '\033[33m',
    logging.ERROR: '\033[31m',
    logging.CRITICAL: '\033[35m',
}
_RESET = '\033[0m'


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: v for k, v in vars(record).items() if k not in _RESERVED_KEYS}


def _plain(value: Any) -> Any:
    """Convert numpy points and scalars to JSON-compatible values."""
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    return value


def _short(value: Any) -> str:
    value = _plain(value)
    if isinstance(value, float):
        return f"{value:.4g}"
    if isinstance(value, list) and all(isinstance(v, float) for v in value):
        return "(" + ", ".join(f"{v:.4g}" for v in value) + ")"
    return str(value)


class JSONFormatter(logging.Formatter):
    """One JSON object per record.

    Keys: timestamp, level, logger, message, then extras. Warnings and
    errors also carry the source location.
    """

    def __init__(self, include_extra: bool = True):
        super().__init__()
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.levelno >= logging.WARNING:
            entry["location"] = f"{record.filename}:{record.lineno} ({record.funcName})"
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        if self.include_extra:
            entry.update({k: _plain(v) for k, v in _extra_fields(record).items()})
        return json.dumps(entry, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """`[HH:MM:SS] LEVEL module: message [key=value, ...]`"""

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:8}"
        if self.use_colors and record.levelno in _LEVEL_COLORS:
            level = f"{_LEVEL_COLORS[record.levelno]}{level}{_RESET}"

        name = record.name
        if name.startswith(PACKAGE_LOGGER + "."):
            name = name[len(PACKAGE_LOGGER) + 1:]

        line = (f"[{datetime.fromtimestamp(record.created):%H:%M:%S}] "
                f"{level} {name}: {record.getMessage()}")
        extras = _extra_fields(record)
        if extras:
            line += " [" + ", ".join(f"{k}={_short(v)}" for k, v in extras.items()) + "]"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    level: int = logging.INFO,
    json_file: Optional[Union[str, Path]] = None,
    console: bool = True,
    use_colors: bool = True,
) -> logging.Logger:
    """Attach handlers to the package logger, replacing previous ones.

    Args:
        level: Minimum log level
        json_file: Optional path of a JSON-lines trace file
        console: Write human-readable records to stderr
        use_colors: ANSI colors on the console

    Returns:
        The package logger (does not propagate to root)
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)
    package_logger.handlers.clear()

    handlers = []
    if console:
        handlers.append((logging.StreamHandler(sys.stderr), ConsoleFormatter(use_colors)))
    if json_file:
        handlers.append((logging.FileHandler(Path(json_file), encoding='utf-8'), JSONFormatter()))
    for handler, formatter in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    package_logger.propagate = False
    return package_logger


def configure_from(logging_config) -> logging.Logger:
    """setup_logging() with the `logging` section of a ProjectConfig."""
    return setup_logging(
        level=logging_config.level_number,
        json_file=logging_config.json_file,
        console=logging_config.console,
        use_colors=logging_config.use_colors,
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


@contextmanager
def log_timing(
    logger: logging.Logger,
    operation: str,
    level: int = logging.DEBUG,
    **extra_fields: Any
) -> Iterator[Dict[str, Any]]:
    """Log start, completion (with milliseconds) and failure of an operation.

    Example:
        with log_timing(logger, "build dimension group", distance=d) as info:
            group = builder.build(a, b)
        info['elapsed_seconds']
    """
    def emit(lvl: int, event: str, text: str, **fields: Any) -> None:
        logger.log(lvl, text, extra={"event": event, "operation": operation,
                                     **extra_fields, **fields})

    timing_info: Dict[str, Any] = {}
    started = time.perf_counter()
    emit(level, "start", f"Starting: {operation}")
    try:
        yield timing_info
    except Exception as e:
        elapsed = time.perf_counter() - started
        emit(logging.ERROR, "error", f"Failed: {operation} - {e}",
             elapsed_seconds=elapsed, error=str(e))
        raise
    timing_info['elapsed_seconds'] = time.perf_counter() - started
    emit(level, "complete",
         f"Completed: {operation} ({timing_info['elapsed_seconds'] * 1000:.2f}ms)",
         **timing_info)


def timed(
    logger: Optional[logging.Logger] = None,
    level: int = logging.DEBUG,
    operation: Optional[str] = None,
) -> Callable[[F], F]:
    """Decorator form of log_timing; defaults to the module logger and qualname."""
    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            with log_timing(logger or logging.getLogger(func.__module__),
                            operation or func.__qualname__, level):
                return func(*args, **kwargs)

        return wrapper  # type: ignore
    return decorator


class _ContextFilter(logging.Filter):
    def __init__(self, fields: Dict[str, Any]):
        super().__init__()
        self.fields = fields

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.fields.items():
            setattr(record, key, value)
        return True


class LogContext:
    """Tag every scene_measure record emitted within a scope.

    The filter is installed on the package handlers: a filter on the package
    logger itself never sees records created by child loggers.

    Example:
        with LogContext(session_id="a1b2"):
            session.handle_click(point)
    """

    _current: Optional['LogContext'] = None

    def __init__(self, **fields: Any):
        self.fields = fields
        self._previous: Optional['LogContext'] = None
        self._filter: Optional[_ContextFilter] = None
        self._handlers: list = []

    def __enter__(self) -> 'LogContext':
        self._previous, LogContext._current = LogContext._current, self
        self._filter = _ContextFilter(self.fields)
        self._handlers = list(logging.getLogger(PACKAGE_LOGGER).handlers)
        for handler in self._handlers:
            handler.addFilter(self._filter)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        for handler in self._handlers:
            handler.removeFilter(self._filter)
        self._handlers = []
        self._filter = None
        LogContext._current = self._previous

    @classmethod
    def current(cls) -> Optional['LogContext']:
        """Innermost active context, if any."""
        return cls._current
