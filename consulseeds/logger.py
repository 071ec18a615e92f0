"""
Structured logging for the Consul seed provider.

Provides centralized logging with console and optional file output,
plus lookup metrics for diagnosing seed resolution at node startup.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks metrics for registry lookups and address resolution.
    """

    def __init__(
        self,
        name: str = "consulseeds",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = False,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()  # Remove existing handlers

        self.metrics = {
            "registry_lookups": 0,
            "records_seen": 0,
            "seeds_resolved": 0,
            "resolution_failures": 0,
            "fallbacks_used": 0,
            "lookups_by_mode": {},
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"consulseeds_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_lookup(self, mode: str, records: int):
        """Record one registry lookup and how many records it returned."""
        self.metrics["registry_lookups"] += 1
        self.metrics["records_seen"] += records
        by_mode = self.metrics["lookups_by_mode"]
        by_mode[mode] = by_mode.get(mode, 0) + 1

    def record_resolution(self, success: bool):
        if success:
            self.metrics["seeds_resolved"] += 1
        else:
            self.metrics["resolution_failures"] += 1

    def record_fallback(self):
        """Record that the static seed list replaced an empty lookup."""
        self.metrics["fallbacks_used"] += 1

    def get_metrics(self) -> dict:
        """Return a copy of the current metrics."""
        metrics_copy = self.metrics.copy()
        metrics_copy["lookups_by_mode"] = dict(self.metrics["lookups_by_mode"])
        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        self.info("=== Seed Resolution Metrics ===")
        self.info(f"Registry lookups: {metrics['registry_lookups']} ({metrics['records_seen']} records)")
        self.info(f"Addresses: {metrics['seeds_resolved']} resolved, {metrics['resolution_failures']} failed")
        self.info(f"Fallback list used: {metrics['fallbacks_used']} time(s)")

        if metrics["lookups_by_mode"]:
            self.info("Lookups by mode:")
            for mode, count in metrics["lookups_by_mode"].items():
                self.info(f"  {mode}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "consulseeds",
    level: Optional[str] = None,
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Level and file output default to CONSUL_SEEDS_LOG_LEVEL and
    CONSUL_SEEDS_LOG_DIR when not given explicitly.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        if level is None:
            level = os.getenv("CONSUL_SEEDS_LOG_LEVEL", "INFO")
        log_dir = os.getenv("CONSUL_SEEDS_LOG_DIR")
        if log_dir and "log_dir" not in kwargs:
            kwargs["log_dir"] = Path(log_dir)
            kwargs.setdefault("enable_file", True)
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
