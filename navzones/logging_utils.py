"""
NavZones - Structured Logging

Every log entry is:
- Structured (JSON)
- Timestamped
- Scoped to one component

Components log their initialization, the inputs they receive, the outputs
they produce and every explicit failure state, with a suggested fix where
one exists.
"""

import json
import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional


class LogLevel(Enum):
    """Log severity levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


_STD_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


class NavLogger:
    """
    Structured JSON logger for one NavZones component.

    Entries are kept in memory, optionally appended to a ``.jsonl`` file and
    optionally echoed through the standard ``logging`` tree under
    ``navzones.<component>`` so host applications can route them.
    """

    def __init__(
        self,
        component: str,
        log_dir: Optional[Path] = None,
        console_output: bool = False,
        max_entries: int = 10000,
    ):
        """
        Initialize logger for a component.

        Args:
            component: Name of the component (e.g., "ZoneRegistry")
            log_dir: Directory for the .jsonl sink; no file is written if None
            console_output: Echo entries through the standard logging module
            max_entries: Number of entries kept in memory
        """
        self.component = component
        self.console_output = console_output
        self.max_entries = max_entries
        self._log_file: Optional[Path] = None
        self._entries: list[dict] = []
        self._std_logger = logging.getLogger(f"navzones.{component.lower()}")

        if log_dir:
            log_dir = Path(log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self._log_file = log_dir / f"{component.lower()}_{timestamp}.jsonl"

    def _format_entry(self, level: LogLevel, message: str, **kwargs: Any) -> dict:
        entry = {
            "timestamp": datetime.now().isoformat(),
            "component": self.component,
            "level": level.value,
            "message": message,
        }
        for key, value in kwargs.items():
            if isinstance(value, Path):
                value = str(value)
            elif hasattr(value, "to_dict"):
                value = value.to_dict()
            entry[key] = value
        return entry

    def _output(self, level: LogLevel, entry: dict) -> None:
        if self.console_output:
            extras = {
                k: v for k, v in entry.items()
                if k not in ("timestamp", "component", "level", "message")
            }
            text = f"[{self.component}] {entry['message']}"
            if extras:
                text += " " + json.dumps(extras, default=str)
            self._std_logger.log(_STD_LEVELS[level], text)

        if self._log_file is not None:
            with open(self._log_file, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry, default=str) + "\n")

        self._entries.append(entry)
        if len(self._entries) > self.max_entries:
            del self._entries[: len(self._entries) - self.max_entries]

    def _log(self, level: LogLevel, message: str, **kwargs: Any) -> None:
        self._output(level, self._format_entry(level, message, **kwargs))

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(LogLevel.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(LogLevel.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(LogLevel.WARNING, message, **kwargs)

    def error(
        self,
        message: str,
        reason: Optional[str] = None,
        suggested_fix: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        """
        Log error message with required context.

        Args:
            message: Error description
            reason: Why the error occurred
            suggested_fix: How to potentially fix it
        """
        if reason:
            kwargs["reason"] = reason
        if suggested_fix:
            kwargs["suggested_fix"] = suggested_fix
        self._log(LogLevel.ERROR, message, **kwargs)

    def log_init(self, **params: Any) -> None:
        self.debug(f"{self.component} initialized", **params)

    def log_input(self, description: str, **data: Any) -> None:
        self.debug(f"Input: {description}", **data)

    def log_output(self, description: str, **data: Any) -> None:
        self.debug(f"Output: {description}", **data)

    def get_entries(self, level: Optional[LogLevel] = None) -> list[dict]:
        """Get all log entries, optionally filtered by level."""
        if level is None:
            return self._entries.copy()
        return [e for e in self._entries if e["level"] == level.value]

    def get_error_count(self) -> int:
        return sum(1 for e in self._entries if e["level"] == LogLevel.ERROR.value)

    def get_summary(self) -> dict:
        counts = {level.value: 0 for level in LogLevel}
        for entry in self._entries:
            counts[entry["level"]] += 1
        return {
            "component": self.component,
            "total_entries": len(self._entries),
            "by_level": counts,
            "log_file": str(self._log_file) if self._log_file else None,
        }
