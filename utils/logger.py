"""
Logging utilities for the program lister.
Provides console output and a per-run log file.
"""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional


class ProgramLogger:
    """
    Logger set-up for the program lister.

    Handlers are attached to the root logger so that the module loggers
    in core/ and utils/ write to the same console and file.

    Features:
    - Console output on stderr (stdout carries command output)
    - File output with detailed information
    - Cleanup of old log files
    """

    def __init__(
        self,
        name: str = "winprogram",
        log_dir: Optional[str] = None,
        console_level: int = logging.WARNING,
        file_level: int = logging.DEBUG
    ):
        """
        Initialize the logger.

        Args:
            name: Logger name
            log_dir: Directory to store log files (default: %LOCALAPPDATA%/WindowsProgram/logs)
            console_level: Logging level for console output
            file_level: Logging level for file output
        """
        self.name = name
        self.logger = logging.getLogger(name)
        self._handlers: List[logging.Handler] = []

        root = logging.getLogger()
        root.setLevel(logging.DEBUG)

        # Set up log directory
        if log_dir is None:
            appdata = os.environ.get("LOCALAPPDATA", os.path.expanduser("~"))
            log_dir = os.path.join(appdata, "WindowsProgram", "logs")

        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        # Create handlers
        self._setup_console_handler(console_level)
        self._setup_file_handler(file_level)

        self.logger.debug(f"Logger initialized: {name}")

    def _setup_console_handler(self, level: int) -> None:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)

        # Simple format for console
        console_handler.setFormatter(logging.Formatter("%(levelname)-8s | %(message)s"))

        self._add_handler(console_handler)
        self.console_handler = console_handler

    def _setup_file_handler(self, level: int) -> None:
        # Generate log filename with timestamp
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = self.log_dir / f"winprogram_{timestamp}.log"

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)

        # Detailed format for file
        file_handler.setFormatter(logging.Formatter(
            "[%(asctime)s] %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))

        self._add_handler(file_handler)
        self.current_log_file = log_file

    def _add_handler(self, handler: logging.Handler) -> None:
        logging.getLogger().addHandler(handler)
        self._handlers.append(handler)

    def set_console_level(self, level: int) -> None:
        """Change the console logging level."""
        self.console_handler.setLevel(level)

    def shutdown(self) -> None:
        """Detach and close the handlers installed by this logger."""
        root = logging.getLogger()
        for handler in self._handlers:
            root.removeHandler(handler)
            handler.close()
        self._handlers.clear()

    def debug(self, message: str) -> None:
        """Log debug message."""
        self.logger.debug(message)

    def info(self, message: str) -> None:
        """Log info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log error message."""
        self.logger.error(message)

    def get_log_file_path(self) -> Path:
        """
        Get the current log file path.

        Returns:
            Path to the current log file
        """
        return self.current_log_file

    def cleanup_old_logs(self, keep_days: int = 30) -> int:
        """
        Clean up log files older than specified days.

        Args:
            keep_days: Number of days to keep logs

        Returns:
            Number of deleted log files
        """
        deleted_count = 0
        current_time = datetime.now()

        for log_file in self.log_dir.glob("winprogram_*.log"):
            if log_file == self.current_log_file:
                continue

            try:
                file_time = datetime.fromtimestamp(log_file.stat().st_mtime)
                if (current_time - file_time).days > keep_days:
                    log_file.unlink()
                    deleted_count += 1
                    self.logger.debug(f"Deleted old log file: {log_file.name}")
            except OSError as e:
                self.logger.warning(f"Failed to delete old log file {log_file.name}: {e}")

        if deleted_count > 0:
            self.logger.info(f"Cleaned up {deleted_count} old log file(s)")

        return deleted_count


# Global logger instance
_global_logger: Optional[ProgramLogger] = None


def get_logger(
    name: str = "winprogram",
    log_dir: Optional[str] = None,
    console_level: int = logging.WARNING
) -> ProgramLogger:
    """
    Get or create the global logger instance.

    Args:
        name: Logger name
        log_dir: Directory to store log files
        console_level: Console level used when the logger is created

    Returns:
        ProgramLogger instance
    """
    global _global_logger

    if _global_logger is None:
        _global_logger = ProgramLogger(name=name, log_dir=log_dir, console_level=console_level)

    return _global_logger


def reset_logger() -> None:
    """Shut down the global logger so the next get_logger() creates a new one."""
    global _global_logger

    if _global_logger is not None:
        _global_logger.shutdown()
        _global_logger = None
