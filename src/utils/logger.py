import json
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from models.enums import LogCategory, LogFormat, LogLevel

# === ANSI COLORS ===
class Colors:
    """ANSI escape codes for colored terminal output"""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'

    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    MAGENTA = '\033[35m'
    CYAN = '\033[36m'
    WHITE = '\033[37m'

    BRIGHT_BLUE = '\033[94m'
    BRIGHT_MAGENTA = '\033[95m'
    BRIGHT_CYAN = '\033[96m'
    BRIGHT_WHITE = '\033[97m'


CATEGORY_COLORS = {
    LogCategory.CONFIG: Colors.CYAN,
    LogCategory.SYSTEM: Colors.BRIGHT_WHITE,
    LogCategory.LIFECYCLE: Colors.BRIGHT_CYAN,
    LogCategory.SIGNAL: Colors.BRIGHT_MAGENTA,
    LogCategory.SHUTDOWN: Colors.MAGENTA,
    LogCategory.TASK: Colors.BRIGHT_BLUE,
    LogCategory.API: Colors.GREEN,
}

LEVEL_SYMBOLS = {
    LogLevel.DEBUG: '·',
    LogLevel.INFO: '✓',
    LogLevel.WARN: '⚠',
    LogLevel.ERROR: '✗',
}

LEVEL_COLORS = {
    LogLevel.DEBUG: Colors.DIM,
    LogLevel.INFO: Colors.GREEN,
    LogLevel.WARN: Colors.YELLOW,
    LogLevel.ERROR: Colors.RED,
}

LEVEL_PRIORITY = {
    LogLevel.DEBUG: 0,
    LogLevel.INFO: 1,
    LogLevel.WARN: 2,
    LogLevel.ERROR: 3,
}


# === CORE LOGGER ===
class Logger:
    """
    Structured logger with compact console output and a JSON line mode

    Console format:
    [HH:MM:SS] CATEGORY ✓ Message
               ├─ key: value
               └─ key: value

    JSON format (one object per line):
    {"timestamp": "2026-01-01T12:00:00+00:00", "level": "info",
     "message": "signal caught", "category": "SIGNAL", "version": "1.0.0",
     "signal": "SIGTERM"}
    """

    def __init__(
        self,
        min_level: LogLevel = LogLevel.INFO,
        use_colors: bool = True,
        log_format: LogFormat = LogFormat.CONSOLE,
        fields: Optional[Dict[str, Any]] = None,
    ):
        """
        Args:
            min_level: Minimum log level to emit
            use_colors: Enable ANSI color codes (console format only)
            log_format: CONSOLE or JSON
            fields: Static fields attached to every JSON record (e.g. version)
        """
        self.min_level = min_level
        self.use_colors = use_colors
        self.log_format = log_format
        self.fields: Dict[str, Any] = dict(fields or {})

    def _should_log(self, level: LogLevel) -> bool:
        return LEVEL_PRIORITY[level] >= LEVEL_PRIORITY[self.min_level]

    def _colorize(self, text: str, color: str) -> str:
        if not self.use_colors:
            return text
        return f"{color}{text}{Colors.RESET}"

    def _format_category(self, category: LogCategory) -> str:
        color = CATEGORY_COLORS.get(category, Colors.WHITE)
        return self._colorize(category.name.ljust(9), color)

    def _format_level_symbol(self, level: LogLevel) -> str:
        symbol = LEVEL_SYMBOLS.get(level, '·')
        return self._colorize(symbol, LEVEL_COLORS.get(level, Colors.WHITE))

    def _emit_console(self, category: LogCategory, message: str, level: LogLevel, details: list):
        timestamp = datetime.now().strftime('[%H:%M:%S]')
        cat = self._format_category(category)
        sym = self._format_level_symbol(level)
        msg = self._colorize(message, LEVEL_COLORS.get(level, Colors.WHITE))
        print(f"{timestamp} {cat} {sym} {msg}")

        if details:
            indent = " " * 11
            for i, d in enumerate(details):
                tree = "└─" if i == len(details) - 1 else "├─"
                print(f"{indent}{self._colorize(tree, Colors.DIM)} {d}")

    def _emit_json(self, category: LogCategory, message: str, level: LogLevel,
                   details: list, extra: Dict[str, Any]):
        record: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "level": level.name.lower(),
            "message": message,
            "category": category.name,
        }
        record.update(self.fields)
        if details:
            record["details"] = list(details)
        record.update(extra)
        print(json.dumps(record, default=str))

    def log(
        self,
        category: LogCategory,
        message: str,
        level: LogLevel = LogLevel.INFO,
        details: Optional[list] = None,
        exc_info: bool = False,
        **kwargs
    ):
        """
        Log a structured message

        Args:
            category: Log category (SIGNAL, LIFECYCLE, etc.)
            message: Main message text
            level: Log level (DEBUG, INFO, WARN, ERROR)
            details: List of detail strings to show below message
            exc_info: Append the exception currently being handled
            **kwargs: Additional key-value pairs shown as details

        Example:
            logger.log(LogCategory.SIGNAL, "signal caught", signal="SIGTERM")

            Output:
            [14:23:45] SIGNAL    ✓ signal caught
                       └─ signal: SIGTERM
        """
        if not self._should_log(level):
            return

        if exc_info:
            exc = sys.exc_info()[1]
            if exc is not None:
                kwargs.setdefault("exception", f"{type(exc).__name__}: {exc}")

        if self.log_format is LogFormat.JSON:
            self._emit_json(category, message, level, list(details or []), kwargs)
            return

        all_details = list(details or [])
        for k, v in kwargs.items():
            all_details.append(f"{k}: {v}")
        self._emit_console(category, message, level, all_details)

    def debug(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.DEBUG, **kw)
    def info(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.INFO, **kw)
    def warn(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.WARN, **kw)
    def error(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.ERROR, **kw)

    def for_category(self, category: LogCategory) -> 'BoundLogger':
        """Return a contextual logger bound to a specific category."""
        return BoundLogger(self, category)


class BoundLogger:
    """Logger bound to a default category, with ability to override if needed."""

    def __init__(self, base: Logger, category: LogCategory):
        self._base = base
        self._category = category

    def log(self, message: str, level: LogLevel = LogLevel.INFO, category: Optional[LogCategory] = None, **kw):
        """Allows overriding category if necessary."""
        self._base.log(category or self._category, message, level, **kw)

    def debug(self, message: str, **kw): self.log(message, LogLevel.DEBUG, **kw)
    def info(self, message: str, **kw): self.log(message, LogLevel.INFO, **kw)
    def warn(self, message: str, **kw): self.log(message, LogLevel.WARN, **kw)
    def error(self, message: str, **kw): self.log(message, LogLevel.ERROR, **kw)

    def with_category(self, category: LogCategory) -> 'BoundLogger':
        return BoundLogger(self._base, category)


# === Global instance helpers ===
_logger = Logger()

def get_logger() -> Logger:
    return _logger

def get_category_logger(category: LogCategory) -> BoundLogger:
    return _logger.for_category(category)

def configure_logger(
    min_level: LogLevel = LogLevel.INFO,
    use_colors: bool = True,
    log_format: LogFormat = LogFormat.CONSOLE,
    fields: Optional[Dict[str, Any]] = None,
):
    """
    Configure the logger singleton in place.

    Bound loggers created at import time keep a reference to the singleton,
    so replacing it would orphan them.
    """
    _logger.min_level = min_level
    _logger.use_colors = use_colors
    _logger.log_format = log_format
    _logger.fields = dict(fields or {})
