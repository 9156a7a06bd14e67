"""
Structured logging for EigenTrust Lab.

Use get_logger() in every module for consistent, aggregation-friendly output.
"""

from eigentrust_lab.lab_logging.logger import bind_run, clear_run, configure_structlog, get_logger

__all__ = ["get_logger", "configure_structlog", "bind_run", "clear_run"]
