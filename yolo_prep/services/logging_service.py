"""
Logging service implementation for yolo-prep.
Console (and optional file) logging over the standard logging module,
plus null and in-memory loggers for headless runs and tests.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from pathlib import Path
import logging
import sys
import threading
from datetime import datetime
from enum import Enum

from .interfaces import ILogger


class LogLevel(Enum):
    """Log level enumeration."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class LoggingService(ILogger):
    """Concrete implementation of logging service."""

    def __init__(self, name: str = "yolo_prep", log_file: Optional[Path] = None,
                 console_level: LogLevel = LogLevel.INFO, file_level: LogLevel = LogLevel.DEBUG):
        self._name = name
        self._log_file = log_file
        self._console_level = console_level
        self._file_level = file_level

        # Core modules log under "yolo_prep.core.*", so they share these handlers
        self._logger = logging.getLogger(name)
        self._logger.setLevel(logging.DEBUG)
        self._logger.handlers.clear()

        self._setup_console_handler()
        self._file_handler: Optional[logging.FileHandler] = None
        if log_file:
            self._file_handler = self._setup_file_handler(log_file, file_level)

    def _setup_console_handler(self) -> logging.Handler:
        """Set up console logging handler."""
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, self._console_level.value))
        console_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        ))
        self._logger.addHandler(console_handler)
        return console_handler

    def _setup_file_handler(self, log_file: Path, level: LogLevel) -> Optional[logging.FileHandler]:
        """Set up file logging handler."""
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
        except OSError as e:
            self._logger.warning(f"Failed to set up file logging at {log_file}: {e}")
            return None

        file_handler.setLevel(getattr(logging, level.value))
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(threadName)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        self._logger.addHandler(file_handler)
        return file_handler

    def debug(self, message: str, **kwargs) -> None:
        """Log a debug message."""
        self._logger.debug(f"{message}{self._format_extra_info(kwargs)}")

    def info(self, message: str, **kwargs) -> None:
        """Log an info message."""
        self._logger.info(f"{message}{self._format_extra_info(kwargs)}")

    def warning(self, message: str, **kwargs) -> None:
        """Log a warning message."""
        self._logger.warning(f"{message}{self._format_extra_info(kwargs)}")

    def error(self, message: str, exception: Optional[Exception] = None, **kwargs) -> None:
        """Log an error message."""
        full_message = f"{message}{self._format_extra_info(kwargs)}"
        if exception:
            self._logger.error(full_message, exc_info=exception)
        else:
            self._logger.error(full_message)

    def _format_extra_info(self, kwargs: Dict[str, Any]) -> str:
        """Format additional keyword arguments into a string."""
        if not kwargs:
            return ""
        parts = [f"{key}={value}" for key, value in kwargs.items()]
        return f" [{', '.join(parts)}]"


class NullLogger(ILogger):
    """Null logger implementation for when logging is disabled."""

    def debug(self, message: str, **kwargs) -> None:
        pass

    def info(self, message: str, **kwargs) -> None:
        pass

    def warning(self, message: str, **kwargs) -> None:
        pass

    def error(self, message: str, exception: Optional[Exception] = None, **kwargs) -> None:
        pass


class MemoryLogger(ILogger):
    """In-memory logger; safe to share between worker threads."""

    def __init__(self, max_entries: int = 1000):
        self._max_entries = max_entries
        self._entries: list = []
        self._lock = threading.Lock()

    def debug(self, message: str, **kwargs) -> None:
        self._add_entry("DEBUG", message, kwargs)

    def info(self, message: str, **kwargs) -> None:
        self._add_entry("INFO", message, kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._add_entry("WARNING", message, kwargs)

    def error(self, message: str, exception: Optional[Exception] = None, **kwargs) -> None:
        entry_kwargs = dict(kwargs)
        if exception:
            entry_kwargs['exception'] = str(exception)
        self._add_entry("ERROR", message, entry_kwargs)

    def _add_entry(self, level: str, message: str, kwargs: Dict[str, Any]) -> None:
        entry = {
            'timestamp': datetime.now(),
            'level': level,
            'message': message,
            'kwargs': kwargs
        }
        with self._lock:
            self._entries.append(entry)
            if len(self._entries) > self._max_entries:
                self._entries = self._entries[-self._max_entries:]

    def get_entries(self, level: Optional[str] = None) -> list:
        """Get log entries, optionally filtered by level."""
        with self._lock:
            if level:
                return [e for e in self._entries if e['level'] == level]
            return list(self._entries)

    def get_stats(self) -> Dict[str, int]:
        """Get statistics about log entries."""
        stats = {'DEBUG': 0, 'INFO': 0, 'WARNING': 0, 'ERROR': 0}
        for entry in self.get_entries():
            if entry['level'] in stats:
                stats[entry['level']] += 1
        return stats
