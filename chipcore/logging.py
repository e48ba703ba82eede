"""Console logging utilities for the emulator and its tools.

Loggers are cheap named views over a shared level, so the core, the
peripherals and the frontends can log under their own names while
``set_log_level`` controls them all at once.
"""

import sys
import time
from typing import Dict, Optional


LEVEL_ORDER = {
    "TRACE": -1,
    "DEBUG": 0,
    "INFO": 1,
    "WARNING": 2,
    "ERROR": 3,
    "CRITICAL": 4,
}

_settings = {"level": "INFO", "use_colors": True, "show_timestamps": True}
_loggers: Dict[str, "ConsoleLogger"] = {}
_start_time = time.time()


class ConsoleLogger:
    """Flexible console logger with colored levels and timestamps."""

    def __init__(
        self,
        name: str = "chipcore",
        log_level: Optional[str] = None,
        use_colors: Optional[bool] = None,
        show_timestamps: Optional[bool] = None,
    ):
        self.name = name
        self._log_level = log_level.upper() if log_level else None
        self.apply_settings(use_colors, show_timestamps)

    def apply_settings(self, use_colors: Optional[bool] = None, show_timestamps: Optional[bool] = None):
        """Resolve output options, falling back to the shared settings."""
        use_colors = _settings["use_colors"] if use_colors is None else use_colors
        self.use_colors = (
            use_colors and hasattr(sys.stderr, "isatty") and sys.stderr.isatty()
        )
        self.show_timestamps = (
            _settings["show_timestamps"] if show_timestamps is None else show_timestamps
        )

        self.colors = (
            {
                "TRACE": "\033[90m",
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {k: "" for k in [*LEVEL_ORDER, "RESET"]}
        )

    @property
    def log_level(self) -> str:
        return self._log_level or _settings["level"]

    def is_enabled(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return LEVEL_ORDER.get(level.upper(), 1) >= LEVEL_ORDER.get(self.log_level, 1)

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - _start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self.is_enabled(level):
            print(self._format_message(level, message), file=sys.stderr, flush=True)

    def trace(self, message: str):
        self.log("TRACE", message)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


def get_logger(name: str) -> ConsoleLogger:
    """Return the shared logger for ``name``."""
    if name not in _loggers:
        _loggers[name] = ConsoleLogger(name)
    return _loggers[name]


def set_log_level(level: str) -> None:
    """Set the level of every logger that has no level of its own."""
    level = level.upper()
    if level not in LEVEL_ORDER:
        raise ValueError(f"Unknown log level '{level}'. Available: {list(LEVEL_ORDER)}")
    _settings["level"] = level


def configure(level: str = "INFO", use_colors: bool = True, show_timestamps: bool = True) -> None:
    """Configure level and console output of all loggers."""
    set_log_level(level)
    _settings["use_colors"] = use_colors
    _settings["show_timestamps"] = show_timestamps
    for logger in _loggers.values():
        logger.apply_settings()
