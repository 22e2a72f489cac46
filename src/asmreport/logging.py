"""
Report Logging

Line-oriented text sinks used by the exporters and the CLI.

The renderer only ever appends whole lines, so every sink here exposes
``write_line``. ``TextLogger`` is the console-facing logger (with structured
helpers for sections and status messages); ``StreamLogger`` forwards lines to
an open text stream, which is how HTML documents reach their files.

Usage:
    from asmreport.logging import StreamLogger, get_logger

    log = get_logger()
    log.section("Disassembly export")
    log.info("Rendering 3 benchmarks...")

    with open(path, 'w', encoding='utf-8') as f:
        render_disassembly(StreamLogger(f), result, case)
"""

import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, TextIO


# Module-level console logger
_report_logger: Optional['TextLogger'] = None


def get_logger() -> 'TextLogger':
    """
    Get the current console logger.

    Returns:
        The active TextLogger, or a default console-only logger if none was set.
    """
    global _report_logger
    if _report_logger is None:
        _report_logger = TextLogger()
    return _report_logger


def set_logger(logger: Optional['TextLogger']):
    """Set (or clear, with None) the module-level console logger."""
    global _report_logger
    _report_logger = logger


@dataclass
class LogConfig:
    """Configuration for console logging."""

    # Echo messages to stdout
    console: bool = True

    # Optional file that mirrors every message
    log_path: Optional[Path] = None

    # Whether to prefix file lines with a timestamp
    file_timestamps: bool = True

    # Width for section separators
    separator_width: int = 80


class TextLogger:
    """
    Console logger with structured helpers.

    Provides:
    - Output to stdout and an optional mirror file
    - An in-memory buffer of everything written (see get_content)
    - Section headers and status prefixes

    Every message is a single line; multi-line strings are written as-is.
    """

    def __init__(self, config: Optional[LogConfig] = None, stream: Optional[TextIO] = None):
        self.config = config or LogConfig()
        self._stream = stream
        self._lines: List[str] = []
        self._log_file: Optional[TextIO] = None

        if self.config.log_path is not None:
            path = Path(self.config.log_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            self._log_file = open(path, 'w', encoding='utf-8')

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so pytest's capsys replacement of sys.stdout is honoured
        return self._stream if self._stream is not None else sys.stdout

    def _write(self, text: str, to_console: bool = True):
        """Write a line to the buffer, the console and the mirror file."""
        self._lines.append(text)

        if to_console and self.config.console:
            self.stream.write(f"{text}\n")

        if self._log_file:
            timestamp = ""
            if self.config.file_timestamps:
                timestamp = f"[{datetime.now().strftime('%H:%M:%S.%f')[:-3]}] "
            self._log_file.write(f"{timestamp}{text}\n")
            self._log_file.flush()

    def write_line(self, text: str = ""):
        """Append one line to the log."""
        self._write(text)

    def info(self, message: str):
        """Log an informational message."""
        self._write(message)

    def debug(self, message: str):
        """Log a debug message (buffer and file only)."""
        self._write(message, to_console=False)

    def warning(self, message: str):
        """Log a warning message."""
        self.write_line(f"WARNING: {message}")

    def error(self, message: str):
        """Log an error message."""
        self.write_line(f"ERROR: {message}")

    def success(self, message: str):
        """Log a success message."""
        self.write_line(f"OK: {message}")

    def section(self, title: str, level: int = 1):
        """
        Write a section header.

        Args:
            title: Section title
            level: Header level (1=major, 2=minor)
        """
        width = self.config.separator_width
        self.write_line("")
        if level == 1:
            self.write_line("=" * width)
            self.write_line(title)
            self.write_line("=" * width)
        else:
            self.write_line(title)
            self.write_line("-" * width)

    def get_content(self) -> str:
        """Get all logged content as a string."""
        return "\n".join(self._lines)

    def close(self):
        """Close the mirror file, if any."""
        if self._log_file:
            self._log_file.close()
            self._log_file = None

    def __enter__(self) -> 'TextLogger':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class StreamLogger:
    """
    Sink that writes each line to a text stream.

    The stream is owned by the caller; StreamLogger never closes it.
    """

    def __init__(self, stream: TextIO):
        self._stream = stream

    def write_line(self, text: str = ""):
        self._stream.write(text)
        self._stream.write("\n")
