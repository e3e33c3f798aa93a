"""
Logging and metrics.
"""

from .logger import log_operation, setup_logger

__all__ = [
    "setup_logger",
    "log_operation",
]
