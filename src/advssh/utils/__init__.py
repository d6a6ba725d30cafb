"""Utility modules for logging and path handling."""
from .logging_config import setup_logging, timed, perf_logger
from .paths import expand_user

__all__ = [
    "setup_logging",
    "timed",
    "perf_logger",
    "expand_user",
]
