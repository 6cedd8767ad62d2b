"""
Structured logging system for jobboard.

Provides centralized logging with console and file outputs, log levels,
and metrics tracking for monitoring application intake and scoring.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json

from .config import load_settings


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks metrics for submitted and scored applications.
    """

    def __init__(
        self,
        name: str = "jobboard",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
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

        # Metrics tracking
        self.metrics = {
            "applications_submitted": 0,
            "applications_scored": 0,
            "scoring_failures": 0,
            "errors_by_type": {},
            "job_scores": {},
        }

        # Console handler
        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        # File handler
        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"jobboard_{datetime.now().strftime('%Y%m%d')}.log"
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

    def critical(self, message: str, **kwargs):
        """Log critical message with optional context."""
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        """Internal logging method with context."""
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str, sort_keys=True)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_application_submitted(self):
        """Increment the submitted-application counter."""
        self.metrics["applications_submitted"] += 1

    def record_application_scored(self, job_id: str, score_percentage: int):
        """Record a successfully scored application for a job."""
        self.metrics["applications_scored"] += 1
        if job_id not in self.metrics["job_scores"]:
            self.metrics["job_scores"][job_id] = {
                "applications": 0,
                "percentage_sum": 0,
            }
        self.metrics["job_scores"][job_id]["applications"] += 1
        self.metrics["job_scores"][job_id]["percentage_sum"] += score_percentage

    def record_scoring_failure(self, error_type: str):
        """Record an application that could not be scored or stored."""
        self.metrics["scoring_failures"] += 1

        # Track error types
        if error_type not in self.metrics["errors_by_type"]:
            self.metrics["errors_by_type"][error_type] = 0
        self.metrics["errors_by_type"][error_type] += 1

    def get_metrics(self) -> dict:
        """Return current metrics."""
        # Calculate average percentages
        metrics_copy = self.metrics.copy()
        for job_id, stats in metrics_copy["job_scores"].items():
            if stats["applications"] > 0:
                stats["average_percentage"] = round(
                    stats["percentage_sum"] / stats["applications"], 1
                )

        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        submitted = metrics["applications_submitted"]
        scored = metrics["applications_scored"]
        overall_rate = 0
        if submitted > 0:
            overall_rate = round(scored / submitted * 100, 1)

        self.info("=== Application Intake Metrics ===")
        self.info(f"Applications: {scored}/{submitted} scored ({overall_rate}%)")

        if metrics["job_scores"]:
            self.info("Average score per job:")
            for job_id, stats in metrics["job_scores"].items():
                avg = stats.get("average_percentage", 0)
                self.info(f"  {job_id}: {stats['applications']} applications, {avg:.1f}% average")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "jobboard",
    level: Optional[str] = None,
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Level, log directory and file output default to the values from
    jobboard.config when not given.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        settings = load_settings()
        kwargs.setdefault("log_dir", settings.log_dir)
        kwargs.setdefault("enable_file", settings.log_to_file)
        _global_logger = StructuredLogger(name=name, level=level or settings.log_level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
